"""Parse boundary: raw Zenchef availabilities JSON -> DayAvailability / Shift / Slot / Offer."""
import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Any

from app.services.availability.types import (
    CancelationParam,
    CapacityBounds,
    DayAvailability,
    Offer,
    PrepaymentParam,
    Shift,
    Slot,
)
from app.services.zenchef.types import ZenchefOffer, ZenchefShift, ZenchefShiftSlot

logger = logging.getLogger(__name__)


def _bool(v: Any) -> bool:
    return bool(v) if v is not None else False


def _int_or_none(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _int_list(values: Any) -> list[int]:
    if not isinstance(values, list):
        return []
    out = []
    for v in values:
        i = _int_or_none(v)
        if i is not None:
            out.append(i)
    return out


def parse_timestamp(value: Any, tz: tzinfo = timezone.utc) -> datetime | None:
    """ISO string or epoch seconds -> aware datetime. Naive values are read in tz. None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        logger.warning("Unparseable bookable timestamp: %r", value)
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=tz)


def _offer_description(raw: Any) -> str | None:
    """Descriptions come as {lang: text}; prefer English, then any language."""
    if isinstance(raw, str):
        return raw.strip() or None
    if isinstance(raw, dict):
        text = raw.get("en") or next((v for v in raw.values() if v), None)
        return str(text).strip() if text else None
    return None


def parse_offer(raw: ZenchefOffer) -> Offer:
    config = raw.get("config") or {}
    return Offer(
        id=int(raw["id"]),
        name=(raw.get("name") or "").strip(),
        description=_offer_description(raw.get("description")),
        is_private=_bool(raw.get("is_private")),
        min_pax_available=_int_or_none(config.get("min_pax_available", raw.get("min_pax_available"))),
        max_pax_available=_int_or_none(config.get("max_pax_available", raw.get("max_pax_available"))),
    )


def parse_slot(raw: ZenchefShiftSlot, tz: tzinfo = timezone.utc) -> Slot:
    rooms_raw = raw.get("available_rooms") or {}
    available_rooms: dict[int, list[int]] = {}
    if isinstance(rooms_raw, dict):
        for k, v in rooms_raw.items():
            size = _int_or_none(k)
            if size is not None:
                available_rooms[size] = _int_list(v)
    return Slot(
        name=str(raw["name"]).strip(),
        closed=_bool(raw.get("closed")),
        marked_as_full=_bool(raw.get("marked_as_full")),
        possible_guests=_int_list(raw.get("possible_guests")),
        available_rooms=available_rooms,
        bookable_from=parse_timestamp(raw.get("bookable_from"), tz),
        bookable_to=parse_timestamp(raw.get("bookable_to"), tz),
    )


def _parse_prepayment(raw: Any) -> PrepaymentParam | None:
    if not isinstance(raw, dict):
        return None
    return PrepaymentParam(
        is_web_booking_askable=_bool(raw.get("is_web_booking_askable")),
        min_guests=_int_or_none(raw.get("min_guests")) or 0,
        charge_per_guest=_int_or_none(raw.get("charge_per_guest")) or 0,
    )


def _parse_cancelation(raw: Any) -> CancelationParam | None:
    if not isinstance(raw, dict):
        return None
    seconds = raw.get("enduser_cancelable_before_seconds", raw.get("enduser_cancelable_before"))
    seconds = _int_or_none(seconds)
    if seconds is None:
        return None
    return CancelationParam(enduser_cancelable_before_seconds=seconds)


def parse_shift(raw: ZenchefShift, tz: tzinfo = timezone.utc) -> Shift:
    capacity = raw.get("capacity") or {}
    offers: list[Offer] = []
    for o in raw.get("offers") or []:
        try:
            offers.append(parse_offer(o))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed offer in shift %s: %s", raw.get("name"), e)
    slots: list[Slot] = []
    for s in raw.get("shift_slots") or []:
        try:
            slots.append(parse_slot(s, tz))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed slot in shift %s: %s", raw.get("name"), e)
    return Shift(
        id=_int_or_none(raw.get("id")),
        name=(raw.get("name") or "").strip(),
        marked_as_full=_bool(raw.get("marked_as_full")),
        capacity=CapacityBounds(
            min=_int_or_none(capacity.get("min")) if isinstance(capacity, dict) else None,
            max=_int_or_none(capacity.get("max")) if isinstance(capacity, dict) else None,
        ),
        bookable_from=parse_timestamp(raw.get("bookable_from"), tz),
        bookable_to=parse_timestamp(raw.get("bookable_to"), tz),
        prepayment=_parse_prepayment(raw.get("prepayment_param")),
        cancelation=_parse_cancelation(raw.get("cancelation_param")),
        is_offer_required=_bool(raw.get("is_offer_required")),
        offer_required_from_pax=_int_or_none(raw.get("offer_required_from_pax")),
        offers=offers,
        waitlist_total=_int_or_none(raw.get("waitlist_total")) or 0,
        slots=slots,
    )


def parse_availability_feed(raw: dict[str, Any], tz: tzinfo = timezone.utc) -> list[DayAvailability]:
    """Parse GET availabilities response. Days with a bad date are skipped; bad shifts are skipped with a warning."""
    days: list[DayAvailability] = []
    data = raw.get("data") if isinstance(raw, dict) else None
    for entry in data or []:
        if not isinstance(entry, dict):
            continue
        try:
            day = date.fromisoformat(str(entry.get("date") or "").strip())
        except ValueError:
            logger.warning("Skipping availability entry with invalid date: %r", entry.get("date"))
            continue
        shifts: list[Shift] = []
        for s in entry.get("shifts") or []:
            try:
                shifts.append(parse_shift(s, tz))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed shift on %s: %s", day, e)
        days.append(DayAvailability(date=day, shifts=shifts))
    return days


def find_day(days: list[DayAvailability], day: date) -> DayAvailability | None:
    for d in days:
        if d.date == day:
            return d
    return None
