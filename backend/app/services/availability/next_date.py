"""Forward scan for the first day with a usable slot when the requested day has none."""
import logging
from datetime import date, timedelta, timezone, tzinfo

from app.core.constants import AVAILABILITY_MAX_RANGE_DAYS, NEXT_AVAILABLE_HORIZON_DAYS
from app.services.availability.parse import parse_availability_feed
from app.services.availability.seating import map_seating_areas
from app.services.availability.types import FeedFetcher, NextAvailableDate, SeatingArea, Slot

logger = logging.getLogger(__name__)


def search_batches(start_date: date, horizon_days: int, max_range_days: int) -> list[tuple[date, date]]:
    """(begin, end) inclusive ranges covering start+1 .. start+horizon, each at most max_range_days long."""
    out = []
    offset = 1
    while offset <= horizon_days:
        last = min(offset + max_range_days - 1, horizon_days)
        out.append((start_date + timedelta(days=offset), start_date + timedelta(days=last)))
        offset = last + 1
    return out


def _first_usable_slot(slots: list[Slot], party_size: int) -> Slot | None:
    for slot in slots:
        if slot.is_open and party_size in slot.possible_guests:
            return slot
    return None


def find_next_available_date(
    fetch_feed: FeedFetcher,
    start_date: date,
    party_size: int,
    known_areas: list[SeatingArea],
    horizon_days: int = NEXT_AVAILABLE_HORIZON_DAYS,
    max_range_days: int = AVAILABILITY_MAX_RANGE_DAYS,
    tz: tzinfo = timezone.utc,
) -> NextAvailableDate | None:
    """
    Batches run sequentially: an early hit stops the scan. A failed batch is logged and skipped.
    The returned seating areas may be empty (date available, but no internally configured room).
    """
    for begin, end in search_batches(start_date, horizon_days, max_range_days):
        try:
            days = parse_availability_feed(fetch_feed(begin, end), tz)
        except Exception as e:
            logger.warning("Next-available-date batch %s..%s failed, continuing: %s", begin, end, e)
            continue
        for day in days:
            if day.date < begin or day.date > end:
                continue
            for shift in day.shifts:
                slot = _first_usable_slot(shift.slots, party_size)
                if slot is None:
                    continue
                areas = map_seating_areas(slot.rooms_for(party_size), known_areas)
                logger.info(
                    "Next available date for %s guests after %s: %s (slot %s, %s seating area(s))",
                    party_size,
                    start_date,
                    day.date,
                    slot.name,
                    len(areas),
                )
                return NextAvailableDate(date=day.date, seating_areas=areas)
    logger.info("No availability for %s guests within %s days after %s", party_size, horizon_days, start_date)
    return None
