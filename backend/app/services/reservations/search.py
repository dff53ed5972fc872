"""
Reservation discovery: server-side filters, typo-tolerant name matching, stale cutoff, deterministic ranking.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from app.core.constants import NAME_MATCH_THRESHOLD, STALE_BOOKING_DAYS, STATUS_CANCELED, STATUS_CONFIRMED
from app.services.reservations.booking import Booking

logger = logging.getLogger(__name__)

RESERVATION_TYPE_FILTER = ("reservation_type", "=", "reservation")
_NAME_SPLIT_RE = re.compile(r"[\s\-]+")


@dataclass(frozen=True)
class SearchFilters:
    phone: str | None = None
    email: str | None = None
    day: date | None = None
    name: str | None = None


def build_search_filters(filters: SearchFilters) -> list[tuple[str, str, str]]:
    """Exact-match filters Zenchef applies server-side. Name is matched locally."""
    out = [RESERVATION_TYPE_FILTER]
    if filters.phone:
        out.append(("phone_number", "=", filters.phone))
    if filters.email:
        out.append(("email", "=", filters.email))
    if filters.day:
        out.append(("day", "=", filters.day.isoformat()))
    return out


def _name_tokens(booking: Booking) -> list[str]:
    """Parts of compound names: "Jean-Pierre" -> ["Jean", "Pierre"]."""
    return [t for t in _NAME_SPLIT_RE.split(booking.full_name) if t]


def name_score(query: str, booking: Booking) -> float:
    """Best 0-100 score of the query against full name, first name, last name and each name token."""
    candidates = [booking.full_name, booking.firstname, booking.lastname, *_name_tokens(booking)]
    best = 0.0
    for candidate in candidates:
        if not candidate:
            continue
        best = max(best, fuzz.ratio(query, candidate, processor=default_process))
    if booking.full_name:
        best = max(best, fuzz.token_sort_ratio(query, booking.full_name, processor=default_process))
    return best


def matches_name(query: str, booking: Booking, threshold: int = NAME_MATCH_THRESHOLD) -> bool:
    return name_score(query, booking) >= threshold


def _status_tier(status: str) -> int:
    if status == STATUS_CONFIRMED:
        return 0
    if status == STATUS_CANCELED:
        return 2
    return 1


def rank_bookings(
    bookings: list[Booking],
    filters: SearchFilters,
    today: date,
    *,
    stale_days: int = STALE_BOOKING_DAYS,
    threshold: int = NAME_MATCH_THRESHOLD,
) -> list[Booking]:
    """
    Drop non-matching names and stale bookings, then sort by (status tier, |day - today|).
    The sort is stable: equal keys keep input order, so ranking the same input twice is identical.
    """
    candidates = bookings
    query = (filters.name or "").strip()
    if query:
        candidates = [b for b in candidates if matches_name(query, b, threshold)]
        logger.debug("Name %r matched %s of %s bookings", query, len(candidates), len(bookings))

    cutoff = today - timedelta(days=stale_days)
    fresh = [b for b in candidates if b.day is not None and b.day >= cutoff]
    if len(fresh) != len(candidates):
        logger.debug("Dropped %s stale bookings (before %s)", len(candidates) - len(fresh), cutoff)

    return sorted(fresh, key=lambda b: (_status_tier(b.status), abs((b.day - today).days)))
