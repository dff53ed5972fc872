"""
Per-day slot resolution: rule chain per shift then per slot, then a fold by slot name.

Rule order (each short-circuits, later rules never run for a dropped shift/slot):
  shift: marked_as_full -> capacity bounds
  slot:  closed/marked_as_full -> bookable window -> party size in possible_guests
         -> rooms mapped to known seating areas
Surviving slots then get prepayment and cancellation flags attached.

The same time can be reachable through several shifts; candidates are folded into one
TimeSlot per name: rooms union, payment requirement and notCancellable are sticky.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone, tzinfo
from functools import reduce

from app.services.availability.seating import map_seating_areas
from app.services.availability.types import (
    DayResolution,
    RequestedTimeInfo,
    SeatingArea,
    SeatingAreaInfo,
    Shift,
    Slot,
    TimeSlot,
)

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def normalize_time(value: str | None) -> str | None:
    """'9:30', '09:30', '09:30:00' -> '09:30'. None/blank -> None; anything else is returned stripped."""
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    m = _TIME_RE.match(s)
    if not m:
        return s
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def reservation_instant(day: date, slot_name: str, tz: tzinfo) -> datetime:
    """Aware datetime for a slot on a day in the restaurant's timezone."""
    hh, mm = (normalize_time(slot_name) or "00:00").split(":")
    return datetime.combine(day, time(int(hh), int(mm)), tzinfo=tz)


@dataclass
class _Candidate:
    name: str
    rooms: list[SeatingAreaInfo] = field(default_factory=list)
    payment_per_guest: int | None = None
    not_cancellable: bool | None = None


def _shift_rejection(shift: Shift, party_size: int) -> str | None:
    if shift.marked_as_full:
        return "shift_marked_as_full"
    if not shift.capacity.contains(party_size):
        return "shift_capacity"
    return None


def _slot_rejection(shift: Shift, slot: Slot, party_size: int, now: datetime) -> str | None:
    if not slot.is_open:
        return "slot_closed_or_full"
    bookable_from = slot.bookable_from or shift.bookable_from
    bookable_to = slot.bookable_to or shift.bookable_to
    if bookable_from is not None and now < bookable_from:
        return "not_yet_bookable"
    if bookable_to is not None and now > bookable_to:
        return "no_longer_bookable"
    if party_size not in slot.possible_guests:
        return "party_size_not_possible"
    return None


def _payment_per_guest(shift: Shift, party_size: int) -> int | None:
    p = shift.prepayment
    if p is not None and p.is_web_booking_askable and party_size >= p.min_guests:
        return p.charge_per_guest
    return None


def _not_cancellable(shift: Shift, slot: Slot, day: date, now: datetime, tz: tzinfo) -> bool | None:
    if shift.cancelation is None:
        return None
    seconds_until = (reservation_instant(day, slot.name, tz) - now).total_seconds()
    return seconds_until < shift.cancelation.enduser_cancelable_before_seconds


def _stricter_payment(a: int | None, b: int | None) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def _stricter_cancellable(a: bool | None, b: bool | None) -> bool | None:
    if a is None and b is None:
        return None
    return bool(a) or bool(b)


def _merge(acc: dict[str, _Candidate], cand: _Candidate) -> dict[str, _Candidate]:
    existing = acc.get(cand.name)
    if existing is None:
        acc[cand.name] = _Candidate(cand.name, list(cand.rooms), cand.payment_per_guest, cand.not_cancellable)
        return acc
    seen = {r.id for r in existing.rooms}
    existing.rooms.extend(r for r in cand.rooms if r.id not in seen)
    existing.payment_per_guest = _stricter_payment(existing.payment_per_guest, cand.payment_per_guest)
    existing.not_cancellable = _stricter_cancellable(existing.not_cancellable, cand.not_cancellable)
    return acc


def _candidates(
    shifts: list[Shift],
    party_size: int,
    known_areas: list[SeatingArea],
    day: date,
    now: datetime,
    tz: tzinfo,
):
    for shift in shifts:
        reason = _shift_rejection(shift, party_size)
        if reason:
            logger.debug("Drop shift %s on %s: %s", shift.name, day, reason)
            continue
        payment = _payment_per_guest(shift, party_size)
        for slot in shift.slots:
            reason = _slot_rejection(shift, slot, party_size, now)
            if reason:
                logger.debug("Drop slot %s (shift %s) on %s: %s", slot.name, shift.name, day, reason)
                continue
            rooms = map_seating_areas(slot.rooms_for(party_size), known_areas)
            if not rooms:
                logger.debug("Drop slot %s (shift %s) on %s: no_known_room", slot.name, shift.name, day)
                continue
            yield _Candidate(
                name=normalize_time(slot.name) or slot.name,
                rooms=rooms,
                payment_per_guest=payment,
                not_cancellable=_not_cancellable(shift, slot, day, now, tz),
            )


def resolve_day_slots(
    day_shifts: list[Shift],
    party_size: int,
    requested_time: str | None,
    known_areas: list[SeatingArea],
    now: datetime,
    day: date,
    tz: tzinfo = timezone.utc,
) -> DayResolution:
    """Available TimeSlots for one day (sorted by time) and, when a time was requested, its verdict."""
    merged: dict[str, _Candidate] = reduce(
        _merge, _candidates(day_shifts, party_size, known_areas, day, now, tz), {}
    )
    slots = [
        TimeSlot(
            time=c.name,
            seating_areas=[r.with_flags(c.payment_per_guest, c.not_cancellable) for r in c.rooms],
        )
        for c in sorted(merged.values(), key=lambda c: c.name)
    ]
    requested_info = None
    wanted = normalize_time(requested_time)
    if wanted is not None:
        hit = merged.get(wanted)
        if hit is None:
            requested_info = RequestedTimeInfo(available=False)
        else:
            requested_info = RequestedTimeInfo(
                available=True,
                rooms=[r.with_flags(hit.payment_per_guest, hit.not_cancellable) for r in hit.rooms],
                payment_per_guest=hit.payment_per_guest,
                not_cancellable=hit.not_cancellable,
            )
    return DayResolution(slots=slots, requested_time_info=requested_info)


def has_waitlist(day_shifts: list[Shift]) -> bool:
    return any(s.waitlist_total > 0 for s in day_shifts)
