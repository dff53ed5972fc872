"""
Mutation planning: decide between the minimal changeTime call and a full booking rewrite,
and build the Zenchef booking payload for create / full update.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Literal

from app.config import settings
from app.core.constants import STATUS_CONFIRMED
from app.services.availability.seating import find_area_by_id
from app.services.availability.types import SeatingArea
from app.services.reservations.booking import Booking

logger = logging.getLogger(__name__)

MODE_TIME_ONLY = "time-only"
MODE_FULL = "full"

MutationMode = Literal["time-only", "full"]


@dataclass(frozen=True)
class BookingDraft:
    """The booking as it should look after a create or update; room_id is already the external id."""

    day: date
    time: str
    guest_count: int
    firstname: str
    lastname: str
    phone: str | None = None
    email: str | None = None
    comment: str | None = None
    allergies: str | None = None
    room_id: int | None = None
    offer_id: int | None = None


@dataclass(frozen=True)
class MutationPlan:
    mode: MutationMode
    payload: dict[str, Any]


def split_name(name: str) -> tuple[str, str]:
    """"Jean Pierre Dupont" -> ("Jean", "Pierre Dupont"); a single word is used for both."""
    parts = name.split()
    if not parts:
        return "", ""
    first = parts[0]
    last = " ".join(parts[1:]) or first
    return first, last


def resolve_room_id(known_areas: list[SeatingArea], seating_area_id: str | None) -> int | None:
    """Internal seating area id -> external room id. Unknown ids mean no preference."""
    if not seating_area_id:
        return None
    area = find_area_by_id(known_areas, seating_area_id)
    if area is None:
        logger.info("Seating area %s not configured, sending booking without room preference", seating_area_id)
        return None
    return area.external_room_id


def build_booking_payload(draft: BookingDraft, country: str | None = None) -> dict[str, Any]:
    """Full create/update body. At most one offer per booking."""
    payload: dict[str, Any] = {
        "day": draft.day.isoformat(),
        "time": draft.time,
        "nb_guests": draft.guest_count,
        "firstname": draft.firstname,
        "lastname": draft.lastname,
        "country": country or settings.default_country,
        "status": STATUS_CONFIRMED,
    }
    if draft.phone:
        payload["phone_number"] = draft.phone
    if draft.email:
        payload["email"] = draft.email
    if draft.comment:
        payload["comment"] = draft.comment
    if draft.allergies:
        payload["allergies"] = draft.allergies
    if draft.room_id is not None:
        payload["wish"] = {"booking_room_id": draft.room_id}
    if draft.offer_id is not None:
        payload["booking_offers"] = [{"offer_id": draft.offer_id, "count": draft.guest_count}]
    return payload


def is_time_only_change(current: Booking, draft: BookingDraft) -> bool:
    """Only the time differs. Contact and free-text fields are compared as given, no normalization."""
    current_offer_id = current.offer.offer_id if current.offer else None
    offer_changed = draft.offer_id is not None and draft.offer_id != current_offer_id
    return (
        current.day == draft.day
        and current.guest_count == draft.guest_count
        and current.firstname == draft.firstname
        and current.lastname == draft.lastname
        and current.phone == draft.phone
        and current.email == draft.email
        and current.comment == draft.comment
        and current.allergies == draft.allergies
        and current.room_id == draft.room_id
        and not offer_changed
        and current.time != draft.time
    )


def plan_update(current: Booking, draft: BookingDraft, country: str | None = None) -> MutationPlan:
    if is_time_only_change(current, draft):
        logger.info("Booking %s: only time changed (%s -> %s), using changeTime", current.id, current.time, draft.time)
        return MutationPlan(mode=MODE_TIME_ONLY, payload={"time": draft.time})
    logger.info("Booking %s: full update", current.id)
    return MutationPlan(mode=MODE_FULL, payload=build_booking_payload(draft, country))
