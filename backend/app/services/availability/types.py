"""
Typed values for the availability engine.

The raw Zenchef feed is parsed into Shift / Slot / Offer right after fetch (see parse.py),
so the rule chain never inspects untyped JSON. Output values (SeatingAreaInfo, TimeSlot,
AvailabilityResult) serialize to the camelCase shape callers render as text or JSON.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Callable


@dataclass(frozen=True)
class Offer:
    """Promotional package. Private offers are never surfaced to customers."""
    id: int
    name: str
    description: str | None = None
    is_private: bool = False
    min_pax_available: int | None = None
    max_pax_available: int | None = None

    def accepts_party_size(self, party_size: int) -> bool:
        if self.min_pax_available is not None and party_size < self.min_pax_available:
            return False
        if self.max_pax_available is not None and party_size > self.max_pax_available:
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class CapacityBounds:
    min: int | None = None
    max: int | None = None

    def contains(self, party_size: int) -> bool:
        if self.min is not None and party_size < self.min:
            return False
        if self.max is not None and party_size > self.max:
            return False
        return True


@dataclass(frozen=True)
class PrepaymentParam:
    is_web_booking_askable: bool = False
    min_guests: int = 0
    charge_per_guest: int = 0  # cents


@dataclass(frozen=True)
class CancelationParam:
    enduser_cancelable_before_seconds: int = 0


@dataclass
class Slot:
    """A bookable time (HH:MM) within a shift."""
    name: str
    closed: bool = False
    marked_as_full: bool = False
    possible_guests: list[int] = field(default_factory=list)
    available_rooms: dict[int, list[int]] = field(default_factory=dict)  # party size -> external room ids
    bookable_from: datetime | None = None
    bookable_to: datetime | None = None

    @property
    def is_open(self) -> bool:
        return not self.closed and not self.marked_as_full

    def rooms_for(self, party_size: int) -> list[int]:
        return list(self.available_rooms.get(party_size) or [])


@dataclass
class Shift:
    """A named service period (lunch, dinner) on one day."""
    name: str
    id: int | None = None
    marked_as_full: bool = False
    capacity: CapacityBounds = field(default_factory=CapacityBounds)
    bookable_from: datetime | None = None
    bookable_to: datetime | None = None
    prepayment: PrepaymentParam | None = None
    cancelation: CancelationParam | None = None
    is_offer_required: bool = False
    offer_required_from_pax: int | None = None
    offers: list[Offer] = field(default_factory=list)
    waitlist_total: int = 0
    slots: list[Slot] = field(default_factory=list)


@dataclass
class DayAvailability:
    date: date
    shifts: list[Shift] = field(default_factory=list)


@dataclass(frozen=True)
class SeatingArea:
    """Internally known seating area, linked to an external (Zenchef) room id."""
    id: str
    external_room_id: int
    name: str
    description: str | None = None
    max_capacity: int = 0


@dataclass(frozen=True)
class SeatingAreaInfo:
    id: str
    external_room_id: int
    name: str
    description: str | None = None
    max_capacity: int = 0
    payment_required_for_confirmation: int | None = None  # charge per guest, cents
    not_cancellable: bool | None = None

    @classmethod
    def from_area(
        cls,
        area: SeatingArea,
        payment_per_guest: int | None = None,
        not_cancellable: bool | None = None,
    ) -> SeatingAreaInfo:
        return cls(
            id=area.id,
            external_room_id=area.external_room_id,
            name=area.name,
            description=area.description,
            max_capacity=area.max_capacity,
            payment_required_for_confirmation=payment_per_guest,
            not_cancellable=not_cancellable,
        )

    def with_flags(self, payment_per_guest: int | None, not_cancellable: bool | None) -> SeatingAreaInfo:
        return replace(
            self,
            payment_required_for_confirmation=payment_per_guest,
            not_cancellable=not_cancellable,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "maxCapacity": self.max_capacity,
        }
        if self.payment_required_for_confirmation is not None:
            out["paymentRequiredForConfirmation"] = self.payment_required_for_confirmation
        if self.not_cancellable is not None:
            out["notCancellable"] = self.not_cancellable
        return out


@dataclass
class TimeSlot:
    time: str
    seating_areas: list[SeatingAreaInfo] = field(default_factory=list)
    is_offer_required: bool = False
    required_offer_ids: list[int] | None = None

    @property
    def payment_required(self) -> int | None:
        for area in self.seating_areas:
            if area.payment_required_for_confirmation:
                return area.payment_required_for_confirmation
        return None

    @property
    def not_cancellable(self) -> bool:
        return any(area.not_cancellable for area in self.seating_areas)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "time": self.time,
            "seatingAreas": [a.to_dict() for a in self.seating_areas],
            "isOfferRequired": self.is_offer_required,
        }
        if self.required_offer_ids is not None:
            out["requiredOfferIds"] = list(self.required_offer_ids)
        return out


@dataclass
class NextAvailableDate:
    date: date
    seating_areas: list[SeatingAreaInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "seatingAreas": [a.to_dict() for a in self.seating_areas]}


@dataclass
class RequestedTimeInfo:
    """Merged verdict for the requested slot name on the requested day."""
    available: bool
    rooms: list[SeatingAreaInfo] = field(default_factory=list)
    payment_per_guest: int | None = None
    not_cancellable: bool | None = None


@dataclass
class DayResolution:
    slots: list[TimeSlot] = field(default_factory=list)
    requested_time_info: RequestedTimeInfo | None = None


@dataclass
class OfferResolution:
    offers: list[Offer] | None = None  # None: no shift on the day requires offers
    required_offer_ids_by_slot: dict[str, list[int]] = field(default_factory=dict)

    def is_offer_required(self, slot_name: str) -> bool:
        return bool(self.required_offer_ids_by_slot.get(slot_name))


@dataclass
class AvailabilityResult:
    is_requested_slot_available: bool | None = None
    offers: list[Offer] | None = None
    available_room_types_on_requested_time: list[SeatingAreaInfo] | None = None
    other_available_slots_for_that_day: list[TimeSlot] = field(default_factory=list)
    next_available_date: NextAvailableDate | None = None
    waitlist_available: bool = False
    requires_escalation: bool = False

    def find_slot(self, time: str) -> TimeSlot | None:
        for slot in self.other_available_slots_for_that_day:
            if slot.time == time:
                return slot
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON shape for callers. `offers` is omitted (not empty) when no offer logic applies."""
        out: dict[str, Any] = {
            "isRequestedSlotAvailable": self.is_requested_slot_available,
            "otherAvailableSlotsForThatDay": [s.to_dict() for s in self.other_available_slots_for_that_day],
            "nextAvailableDate": self.next_available_date.to_dict() if self.next_available_date else None,
        }
        if self.offers is not None:
            out["offers"] = [o.to_dict() for o in self.offers]
        if self.available_room_types_on_requested_time is not None:
            out["availableRoomTypesOnRequestedTime"] = [
                a.to_dict() for a in self.available_room_types_on_requested_time
            ]
        if self.waitlist_available:
            out["waitlistAvailable"] = True
        if self.requires_escalation:
            out["requiresEscalation"] = True
        return out


@dataclass
class RestaurantContext:
    """
    Per-call restaurant configuration passed into the engine (no hidden DB reads).
    Built by restaurant_service.load_restaurant_context or directly in tests.
    """
    restaurant_id: str
    max_escalation_seating: int
    seating_areas: list[SeatingArea] = field(default_factory=list)
    zenchef_id: str = ""
    api_token: str = ""
    timezone: str = "Europe/Paris"
    name: str = ""


# (date_begin, date_end) -> raw availabilities response ({"data": [{"date", "shifts"}]})
FeedFetcher = Callable[[date, date], dict[str, Any]]
