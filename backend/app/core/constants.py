"""
Centralized constants for the availability engine and reservation search (Encapsulate What Changes).

.env overrides the defaults below; values are clamped so a bad env var cannot disable a rule.
"""
import logging
import os

_log = logging.getLogger(__name__)


def _int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


# Next-available-date search: how far forward we scan, and the feed's max days per request
NEXT_AVAILABLE_HORIZON_DAYS = _int("NEXT_AVAILABLE_HORIZON_DAYS", 30, min_val=1, max_val=120)
AVAILABILITY_MAX_RANGE_DAYS = _int("AVAILABILITY_MAX_RANGE_DAYS", 30, min_val=1, max_val=40)

# Reservation search: bookings older than this are never actionable
STALE_BOOKING_DAYS = _int("STALE_BOOKING_DAYS", 7, min_val=0, max_val=365)
# Name matching score (0-100). 60 catches "Jon Smith" / "Smiht" but not unrelated names.
NAME_MATCH_THRESHOLD = _int("NAME_MATCH_THRESHOLD", 60, min_val=1, max_val=100)
BOOKING_SEARCH_LIMIT = _int("BOOKING_SEARCH_LIMIT", 100, min_val=1, max_val=500)

# Booking statuses (raw Zenchef codes)
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELED = "canceled"

STATUS_DESCRIPTIONS: dict[str, str] = {
    "waiting": "Waiting for confirmation",
    "waiting_customer": "Waiting for customer feedback",
    "confirmed": "Confirmed",
    "canceled": "Canceled",
    "refused": "Refused",
    "arrived": "Customer arrived",
    "seated": "Seated",
    "over": "Completed",
    "no_shown": "No show",
}

# A booking in one of these statuses can no longer be modified or cancelled
UNCHANGEABLE_STATUSES = frozenset(["canceled", "refused", "over", "no_shown"])

# Mutation failures with these status codes mean the slot was taken in between
SLOT_TAKEN_STATUS_CODES = frozenset([400, 409, 412])

_log.debug(
    "Engine config: horizon_days=%s max_range_days=%s stale_booking_days=%s name_threshold=%s",
    NEXT_AVAILABLE_HORIZON_DAYS,
    AVAILABILITY_MAX_RANGE_DAYS,
    STALE_BOOKING_DAYS,
    NAME_MATCH_THRESHOLD,
)
