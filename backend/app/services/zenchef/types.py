"""
Typed definitions for raw Zenchef API payloads.

Availabilities (v2): GET /restaurants/{id}/availabilities -> {"data": [ZenchefDay]}.
Bookings (v1): GET /bookings -> {"data": [ZenchefBooking], "paginator": {...}}.
These describe what arrives on the wire; the engine parses them into dataclasses
(availability.parse, reservations.booking) right after fetch.
"""

from typing import Any, TypedDict


class ZenchefOfferConfig(TypedDict, total=False):
    min_pax_available: int
    max_pax_available: int


class ZenchefOffer(TypedDict, total=False):
    id: int
    name: str
    description: dict[str, str]  # {"en": "...", "fr": "..."}
    is_private: bool
    config: ZenchefOfferConfig


class ZenchefShiftSlot(TypedDict, total=False):
    name: str  # "HH:MM"
    closed: bool
    marked_as_full: bool
    possible_guests: list[int]
    waitlist_possible_guests: list[int]
    available_rooms: dict[str, list[int]]  # party size (as string) -> room ids
    bookable_from: str | None
    bookable_to: str | None


class ZenchefPrepaymentParam(TypedDict, total=False):
    is_web_booking_askable: bool
    min_guests: int
    charge_per_guest: int  # cents


class ZenchefCancelationParam(TypedDict, total=False):
    enduser_cancelable_before: int  # seconds before the reservation


class ZenchefShift(TypedDict, total=False):
    id: int
    name: str  # "Lunch", "Dinner"
    marked_as_full: bool
    capacity: dict[str, int | None]  # {"min": 2, "max": 8}
    bookable_from: str | None
    bookable_to: str | None
    prepayment_param: ZenchefPrepaymentParam | None
    cancelation_param: ZenchefCancelationParam | None
    is_offer_required: bool
    offer_required_from_pax: int | None
    offers: list[ZenchefOffer]
    waitlist_total: int
    shift_slots: list[ZenchefShiftSlot]


class ZenchefDay(TypedDict, total=False):
    date: str  # "YYYY-MM-DD"
    shifts: list[ZenchefShift]


class ZenchefBookingOffer(TypedDict, total=False):
    offer_id: int
    count: int
    offer_data: dict[str, Any]  # {"name": ..., "description": ...}


class ZenchefBooking(TypedDict, total=False):
    id: int
    day: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"
    nb_guests: int
    firstname: str
    lastname: str
    phone_number: str | None
    email: str | None
    comment: str | None
    allergies: str | None
    status: str  # confirmed, waiting, canceled, seated, over, no_shown, ...
    shift_slot: dict[str, Any] | None  # {"name", "shift": {"id", "name"}}
    booking_offers: list[ZenchefBookingOffer]
    wish: dict[str, Any] | None  # {"booking_room_id": int}
    url: str | None  # prepayment link when required
