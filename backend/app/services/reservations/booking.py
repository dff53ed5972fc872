"""
Booking boundary: raw Zenchef booking dict -> Booking dataclass, plus the read-side
view (status description, can_modify / can_cancel) returned by get/search.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from app.core.constants import STATUS_DESCRIPTIONS, UNCHANGEABLE_STATUSES
from app.services.zenchef.types import ZenchefBooking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingOffer:
    offer_id: int
    name: str | None = None
    description: str | None = None
    count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"offerId": self.offer_id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Booking:
    id: str
    day: date | None
    time: str
    guest_count: int
    firstname: str = ""
    lastname: str = ""
    phone: str | None = None
    email: str | None = None
    comment: str | None = None
    allergies: str | None = None
    status: str = ""
    offer: BookingOffer | None = None
    shift_name: str | None = None
    room_id: int | None = None
    prepayment_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


def _parse_day(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Unparseable booking day %r", value)
        return None


def _parse_offer(raw_offers: Any) -> BookingOffer | None:
    """A booking carries at most one offer; only the first entry is meaningful."""
    if not isinstance(raw_offers, list) or not raw_offers:
        return None
    first = raw_offers[0]
    if not isinstance(first, dict) or first.get("offer_id") is None:
        return None
    data = first.get("offer_data") or {}
    description = data.get("description")
    if isinstance(description, dict):
        description = description.get("en") or next(iter(description.values()), None)
    try:
        offer_id = int(first["offer_id"])
    except (TypeError, ValueError):
        return None
    return BookingOffer(
        offer_id=offer_id,
        name=data.get("name"),
        description=description,
        count=first.get("count"),
    )


def _room_id(raw: dict[str, Any]) -> int | None:
    wish = raw.get("wish") or {}
    value = wish.get("booking_room_id") if isinstance(wish, dict) else None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def parse_booking(raw: ZenchefBooking) -> Booking:
    shift_slot = raw.get("shift_slot") or {}
    shift = shift_slot.get("shift") if isinstance(shift_slot, dict) else None
    try:
        guests = int(raw.get("nb_guests") or 0)
    except (TypeError, ValueError):
        guests = 0
    return Booking(
        id=str(raw.get("id", "")),
        day=_parse_day(raw.get("day")),
        time=str(raw.get("time") or "")[:5],
        guest_count=guests,
        firstname=(raw.get("firstname") or "").strip(),
        lastname=(raw.get("lastname") or "").strip(),
        phone=raw.get("phone_number"),
        email=raw.get("email"),
        comment=raw.get("comment"),
        allergies=raw.get("allergies"),
        status=raw.get("status") or "",
        offer=_parse_offer(raw.get("booking_offers")),
        shift_name=(shift or {}).get("name") if isinstance(shift, dict) else None,
        room_id=_room_id(raw),
        prepayment_url=raw.get("url"),
    )


def parse_bookings(raw: dict[str, Any]) -> list[Booking]:
    """Search response {"data": [...]} -> bookings; entries without an id are skipped."""
    out: list[Booking] = []
    for item in raw.get("data") or []:
        if not isinstance(item, dict) or item.get("id") is None:
            logger.warning("Skipping booking entry without id")
            continue
        out.append(parse_booking(item))
    return out


def status_description(status: str) -> str:
    return STATUS_DESCRIPTIONS.get(status, status)


def is_changeable(booking: Booking, today: date) -> bool:
    """Modifiable and cancellable share one rule: not in a final status, not in the past."""
    if booking.status in UNCHANGEABLE_STATUSES:
        return False
    if booking.day is None or booking.day < today:
        return False
    return True


@dataclass(frozen=True)
class BookingView:
    booking: Booking
    status_description: str
    can_modify: bool
    can_cancel: bool

    @classmethod
    def of(cls, booking: Booking, today: date) -> BookingView:
        changeable = is_changeable(booking, today)
        return cls(
            booking=booking,
            status_description=status_description(booking.status),
            can_modify=changeable,
            can_cancel=changeable,
        )

    def to_dict(self) -> dict[str, Any]:
        b = self.booking
        return {
            "bookingId": b.id,
            "status": b.status,
            "statusDescription": self.status_description,
            "date": b.day.isoformat() if b.day else None,
            "time": b.time,
            "numberOfPeople": b.guest_count,
            "customerName": b.full_name,
            "customerPhone": b.phone,
            "customerEmail": b.email,
            "comments": b.comment,
            "allergies": b.allergies,
            "seatingArea": b.shift_name,
            "offer": b.offer.to_dict() if b.offer else None,
            "canModify": self.can_modify,
            "canCancel": self.can_cancel,
        }


def summary_dict(booking: Booking) -> dict[str, Any]:
    """Search result row."""
    return {
        "bookingId": booking.id,
        "status": booking.status,
        "statusDescription": status_description(booking.status),
        "date": booking.day.isoformat() if booking.day else None,
        "time": booking.time,
        "numberOfPeople": booking.guest_count,
        "seatingArea": booking.shift_name,
        "customerName": booking.full_name,
        "customerPhone": booking.phone,
    }
