"""
Availability entry point: escalation gate, then day resolution, offers, and next-date fallback.

Pure apart from the injected feed fetcher; restaurant config comes in as a RestaurantContext.
"""
import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.errors import AvailabilityCheckError, CredentialsNotConfiguredError
from app.services.availability.next_date import find_next_available_date
from app.services.availability.offers import resolve_offer_requirements
from app.services.availability.parse import find_day, parse_availability_feed
from app.services.availability.seating import filter_below_escalation
from app.services.availability.slots import has_waitlist, normalize_time, resolve_day_slots
from app.services.availability.types import AvailabilityResult, FeedFetcher, RestaurantContext

logger = logging.getLogger(__name__)


def restaurant_tz(ctx: RestaurantContext):
    try:
        return ZoneInfo(ctx.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r for restaurant %s, using UTC", ctx.timezone, ctx.restaurant_id)
        return timezone.utc


def requires_escalation(ctx: RestaurantContext, party_size: int) -> bool:
    return party_size >= ctx.max_escalation_seating


def check_availability(
    ctx: RestaurantContext,
    fetch_feed: FeedFetcher,
    day: date,
    party_size: int,
    requested_time: str | None = None,
    now: datetime | None = None,
) -> AvailabilityResult:
    """
    Yes/no/alternatives for party_size on day (optionally at requested_time).

    Raises AvailabilityCheckError when the day's feed cannot be fetched; failures inside
    the next-date scan are absorbed there.
    """
    if requires_escalation(ctx, party_size):
        # Large parties must never get an automated slot offer; no feed call is made.
        logger.info(
            "Party size %s >= %s for restaurant %s, requires manager escalation",
            party_size,
            ctx.max_escalation_seating,
            ctx.restaurant_id,
        )
        return AvailabilityResult(is_requested_slot_available=False, requires_escalation=True)

    now = now or datetime.now(timezone.utc)
    tz = restaurant_tz(ctx)
    wanted = normalize_time(requested_time)
    known_areas = filter_below_escalation(ctx.seating_areas, ctx.max_escalation_seating)

    try:
        days = parse_availability_feed(fetch_feed(day, day), tz)
    except CredentialsNotConfiguredError:
        raise
    except Exception as e:
        logger.exception("Error checking availability for restaurant %s on %s: %s", ctx.restaurant_id, day, e)
        raise AvailabilityCheckError(e) from e

    day_data = find_day(days, day)
    if day_data is None:
        logger.info("No feed entry for %s, searching next available date", day)
        return AvailabilityResult(
            is_requested_slot_available=False if wanted is not None else None,
            next_available_date=find_next_available_date(fetch_feed, day, party_size, known_areas, tz=tz),
        )

    resolution = resolve_day_slots(day_data.shifts, party_size, wanted, known_areas, now, day, tz)
    info = resolution.requested_time_info
    verdict = info.available if info is not None else None

    if not resolution.slots:
        if has_waitlist(day_data.shifts):
            logger.info("No availability but waiting list is available for %s", day)
            return AvailabilityResult(is_requested_slot_available=verdict, waitlist_available=True)
        return AvailabilityResult(
            is_requested_slot_available=verdict,
            next_available_date=find_next_available_date(fetch_feed, day, party_size, known_areas, tz=tz),
        )

    offers = resolve_offer_requirements(day_data.shifts, party_size)
    for slot in resolution.slots:
        ids = offers.required_offer_ids_by_slot.get(slot.time)
        slot.is_offer_required = bool(ids)
        slot.required_offer_ids = list(ids) if ids else None

    return AvailabilityResult(
        is_requested_slot_available=verdict,
        offers=offers.offers,
        available_room_types_on_requested_time=info.rooms if info is not None else None,
        other_available_slots_for_that_day=resolution.slots,
    )
