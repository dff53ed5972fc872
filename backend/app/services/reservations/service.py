"""
Reservation service: the surface callers use (voice agent tools, admin API).
Composes the availability engine, search ranker and mutation planner with the Zenchef client.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

from app.core.constants import BOOKING_SEARCH_LIMIT, SLOT_TAKEN_STATUS_CODES, STATUS_CANCELED
from app.core.errors import (
    BookingNotFoundError,
    EscalationRequiredError,
    InvalidOfferError,
    OfferRequiredError,
    SlotNoLongerAvailableError,
    ZenchefApiError,
)
from app.services.availability.orchestrator import check_availability, requires_escalation, restaurant_tz
from app.services.availability.slots import normalize_time
from app.services.availability.types import AvailabilityResult, RestaurantContext, TimeSlot
from app.services.reservations.booking import Booking, BookingView, parse_booking, parse_bookings
from app.services.reservations.mutation import (
    MODE_TIME_ONLY,
    BookingDraft,
    build_booking_payload,
    plan_update,
    resolve_room_id,
    split_name,
)
from app.services.reservations.phone import normalize_phone_number
from app.services.reservations.search import SearchFilters, build_search_filters, rank_bookings

logger = logging.getLogger(__name__)

STATUS_NOT_FOUND = 404


class BookingClient(Protocol):
    """What the service needs from the transport; ZenchefClient satisfies it."""

    def get_availabilities(self, date_begin: date, date_end: date) -> dict[str, Any]: ...
    def search_bookings(self, filters: list[tuple[str, str, str]], *, limit: int = ..., page: int = ...) -> dict[str, Any]: ...
    def get_booking(self, booking_id: str) -> dict[str, Any]: ...
    def create_booking(self, payload: dict[str, Any]) -> dict[str, Any]: ...
    def update_booking(self, booking_id: str, payload: dict[str, Any]) -> dict[str, Any]: ...
    def change_time(self, booking_id: str, payload: dict[str, Any]) -> dict[str, Any]: ...
    def change_status(self, booking_id: str, status: str) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ReservationRequest:
    party_size: int
    phone: str
    name: str
    day: date
    time: str
    comments: str | None = None
    email: str | None = None
    seating_area_id: str | None = None
    allergies: str | None = None
    offer_id: int | None = None


@dataclass(frozen=True)
class ReservationChanges:
    """Partial update: None means keep the current value."""

    party_size: int | None = None
    phone: str | None = None
    name: str | None = None
    day: date | None = None
    time: str | None = None
    comments: str | None = None
    email: str | None = None
    seating_area_id: str | None = None
    allergies: str | None = None
    offer_id: int | None = None


@dataclass
class ReservationOutcome:
    booking_id: str
    draft: BookingDraft
    mode: str | None = None  # update only: "time-only" or "full"
    prepayment_required: bool = False
    prepayment_url: str | None = None
    offer_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = self.draft
        out: dict[str, Any] = {
            "bookingId": self.booking_id,
            "date": d.day.isoformat(),
            "time": d.time,
            "numberOfCustomers": d.guest_count,
            "name": f"{d.firstname} {d.lastname}".strip(),
            "phone": d.phone,
            "email": d.email,
            "comments": d.comment,
            "allergies": d.allergies,
            "offerId": d.offer_id,
            "prepaymentRequired": self.prepayment_required,
        }
        if self.mode:
            out["mode"] = self.mode
        if self.prepayment_url:
            out["prepaymentUrl"] = self.prepayment_url
        if self.offer_name:
            out["offerName"] = self.offer_name
        return out

    def describe(self, created: bool) -> str:
        d = self.draft
        head = "Successfully created a new reservation." if created else "Successfully updated the reservation."
        parts = [head, f"Booking ID: {self.booking_id}."]
        contact = f"Customer: {d.firstname} {d.lastname}".strip() + f" (phone: {d.phone}"
        if d.email:
            contact += f", email: {d.email}"
        parts.append(contact + ").")
        parts.append(f"Reservation: {d.guest_count} people on {d.day.isoformat()} at {d.time}.")
        if d.comment:
            parts.append(f"Special requests: {d.comment}.")
        if d.allergies:
            parts.append(f"Allergies: {d.allergies}.")
        if d.offer_id is not None:
            parts.append(f"Selected offer: {self.offer_name or f'ID {d.offer_id}'}.")
        if self.prepayment_required:
            parts.append("PREPAYMENT REQUIRED: A payment link has been sent to the customer's email.")
        return " ".join(parts)


def validate_offer(slot: TimeSlot | None, offer_id: int | None) -> None:
    """Raise when the slot requires an offer and none, or one outside its required ids, is given."""
    if slot is None or not slot.is_offer_required:
        return
    valid = slot.required_offer_ids or []
    if offer_id is None:
        raise OfferRequiredError(valid)
    if valid and offer_id not in valid:
        raise InvalidOfferError(offer_id, valid)


def _offer_name(availability: AvailabilityResult | None, offer_id: int | None) -> str | None:
    if availability is None or offer_id is None or not availability.offers:
        return None
    for offer in availability.offers:
        if offer.id == offer_id:
            return offer.name
    return None


class ReservationService:
    """One restaurant's reservations. Restaurant config is passed in; all I/O goes through the client."""

    def __init__(self, client: BookingClient, ctx: RestaurantContext) -> None:
        self._client = client
        self._ctx = ctx

    @property
    def context(self) -> RestaurantContext:
        return self._ctx

    def _today(self) -> date:
        return datetime.now(restaurant_tz(self._ctx)).date()

    # --- Availability ---

    def check_availability(
        self,
        day: date,
        party_size: int,
        time: str | None = None,
        now: datetime | None = None,
    ) -> AvailabilityResult:
        return check_availability(
            self._ctx,
            self._client.get_availabilities,
            day,
            party_size,
            requested_time=time,
            now=now,
        )

    # --- Read ---

    def search_reservations(
        self,
        phone: str | None = None,
        email: str | None = None,
        day: date | None = None,
        name: str | None = None,
        today: date | None = None,
    ) -> list[Booking]:
        filters = SearchFilters(
            phone=normalize_phone_number(phone) if phone else None,
            email=(email or "").strip() or None,
            day=day,
            name=name,
        )
        try:
            raw = self._client.search_bookings(build_search_filters(filters), limit=BOOKING_SEARCH_LIMIT, page=1)
        except ZenchefApiError as e:
            if e.status_code == STATUS_NOT_FOUND:
                return []
            raise
        bookings = parse_bookings(raw)
        ranked = rank_bookings(bookings, filters, today or self._today())
        logger.info(
            "Restaurant %s: booking search returned %s, %s after ranking",
            self._ctx.restaurant_id,
            len(bookings),
            len(ranked),
        )
        return ranked

    def _fetch_booking(self, booking_id: str) -> Booking:
        try:
            raw = self._client.get_booking(booking_id)
        except ZenchefApiError as e:
            if e.status_code == STATUS_NOT_FOUND:
                raise BookingNotFoundError(booking_id) from e
            raise
        if not raw:
            raise BookingNotFoundError(booking_id)
        return parse_booking(raw)

    def get_reservation(self, booking_id: str, today: date | None = None) -> BookingView:
        return BookingView.of(self._fetch_booking(booking_id), today or self._today())

    # --- Mutations ---

    def _slot_taken(self, e: ZenchefApiError, day: date, time: str) -> None:
        if e.status_code in SLOT_TAKEN_STATUS_CODES:
            logger.warning("Slot %s %s rejected by Zenchef (%s): %s", day, time, e.status_code, e)
            raise SlotNoLongerAvailableError(day.isoformat(), time) from e

    def _guard_escalation(self, party_size: int) -> None:
        if requires_escalation(self._ctx, party_size):
            logger.info(
                "Restaurant %s: refusing automated booking for party of %s (threshold %s)",
                self._ctx.restaurant_id,
                party_size,
                self._ctx.max_escalation_seating,
            )
            raise EscalationRequiredError(party_size, self._ctx.max_escalation_seating)

    def create_reservation(self, request: ReservationRequest, now: datetime | None = None) -> ReservationOutcome:
        time = normalize_time(request.time) or request.time
        phone = normalize_phone_number(request.phone)
        logger.info(
            "Restaurant %s: creating reservation for %s on %s at %s (offer=%s, seating=%s)",
            self._ctx.restaurant_id,
            request.party_size,
            request.day,
            time,
            request.offer_id,
            request.seating_area_id,
        )

        self._guard_escalation(request.party_size)
        availability = self.check_availability(request.day, request.party_size, time, now=now)
        slot = availability.find_slot(time)
        validate_offer(slot, request.offer_id)

        firstname, lastname = split_name(request.name)
        draft = BookingDraft(
            day=request.day,
            time=time,
            guest_count=request.party_size,
            firstname=firstname,
            lastname=lastname,
            phone=phone,
            email=request.email,
            comment=request.comments,
            allergies=request.allergies,
            room_id=resolve_room_id(self._ctx.seating_areas, request.seating_area_id),
            offer_id=request.offer_id,
        )
        try:
            data = self._client.create_booking(build_booking_payload(draft))
        except ZenchefApiError as e:
            self._slot_taken(e, request.day, time)
            raise

        booking_id = str(data.get("id", ""))
        outcome = ReservationOutcome(
            booking_id=booking_id,
            draft=draft,
            prepayment_required=bool(slot and slot.payment_required),
            offer_name=_offer_name(availability, request.offer_id),
        )
        if outcome.prepayment_required and booking_id:
            outcome.prepayment_url = self._prepayment_url(booking_id)
        logger.info("Restaurant %s: created booking %s", self._ctx.restaurant_id, booking_id)
        return outcome

    def _prepayment_url(self, booking_id: str) -> str | None:
        try:
            url = self._client.get_booking(booking_id).get("url")
        except ZenchefApiError as e:
            logger.warning("Could not fetch prepayment link for booking %s: %s", booking_id, e)
            return None
        if not url:
            logger.info("Prepayment required for booking %s but no link yet", booking_id)
        return url

    def update_reservation(
        self,
        booking_id: str,
        changes: ReservationChanges,
        now: datetime | None = None,
    ) -> ReservationOutcome:
        current = self._fetch_booking(booking_id)
        logger.info("Restaurant %s: updating booking %s with %s", self._ctx.restaurant_id, booking_id, changes)

        if changes.name is not None:
            firstname, lastname = split_name(changes.name)
        else:
            firstname, lastname = current.firstname, current.lastname
        day = changes.day or current.day
        if day is None:
            raise BookingNotFoundError(booking_id)
        time = normalize_time(changes.time) if changes.time else current.time
        guest_count = changes.party_size or current.guest_count
        if changes.party_size is not None:
            self._guard_escalation(guest_count)
        existing_offer_id = current.offer.offer_id if current.offer else None
        offer_id = changes.offer_id if changes.offer_id is not None else existing_offer_id

        availability: AvailabilityResult | None = None
        if changes.day or changes.time:
            availability = self.check_availability(day, guest_count, time, now=now)
            validate_offer(availability.find_slot(time), offer_id)

        if changes.seating_area_id is not None:
            room_id = resolve_room_id(self._ctx.seating_areas, changes.seating_area_id)
        else:
            room_id = current.room_id

        draft = BookingDraft(
            day=day,
            time=time,
            guest_count=guest_count,
            firstname=firstname,
            lastname=lastname,
            phone=normalize_phone_number(changes.phone) if changes.phone else current.phone,
            email=changes.email if changes.email is not None else current.email,
            comment=changes.comments if changes.comments is not None else current.comment,
            allergies=changes.allergies if changes.allergies is not None else current.allergies,
            room_id=room_id,
            offer_id=offer_id,
        )
        plan = plan_update(current, draft)
        try:
            if plan.mode == MODE_TIME_ONLY:
                self._client.change_time(booking_id, plan.payload)
            else:
                self._client.update_booking(booking_id, plan.payload)
        except ZenchefApiError as e:
            self._slot_taken(e, day, time)
            raise

        return ReservationOutcome(
            booking_id=booking_id,
            draft=draft,
            mode=plan.mode,
            offer_name=_offer_name(availability, offer_id),
        )

    def cancel_reservation(self, booking_id: str) -> dict[str, Any]:
        try:
            self._client.change_status(booking_id, STATUS_CANCELED)
        except ZenchefApiError as e:
            if e.status_code == STATUS_NOT_FOUND:
                raise BookingNotFoundError(booking_id) from e
            raise
        logger.info("Restaurant %s: canceled booking %s", self._ctx.restaurant_id, booking_id)
        return {"bookingId": booking_id, "status": STATUS_CANCELED}
