"""
Reservations for one restaurant: availability, search, get, create, update, cancel.
Mounted under /restaurants/{restaurant_id}; responses carry a `description` the voice agent can read out.
"""
import datetime
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.errors import ReservationError, reservation_error_to_http
from app.db.session import get_db
from app.services.availability import describe_availability, describe_escalation
from app.services.availability.types import RestaurantContext
from app.services.reservations.booking import summary_dict
from app.services.reservations.service import ReservationChanges, ReservationRequest, ReservationService
from app.services.restaurant_service import load_restaurant_context
from app.services.zenchef import ZenchefClient, client_for

router = APIRouter()
logger = logging.getLogger(__name__)


class AvailabilityRequest(BaseModel):
    date: datetime.date
    party_size: int = Field(gt=0)
    time: str | None = None  # "HH:MM"; omit for the whole day


class CreateReservationRequest(BaseModel):
    party_size: int = Field(gt=0)
    phone: str
    name: str = Field(min_length=1)
    date: datetime.date
    time: str
    comments: str | None = None
    email: str | None = None
    seating_area_id: str | None = None
    allergies: str | None = None
    offer_id: int | None = None  # required when the slot has isOfferRequired


class UpdateReservationRequest(BaseModel):
    party_size: int | None = Field(default=None, gt=0)
    phone: str | None = None
    name: str | None = None
    date: datetime.date | None = None
    time: str | None = None
    comments: str | None = None
    email: str | None = None
    seating_area_id: str | None = None
    allergies: str | None = None
    offer_id: int | None = None


def _handle_reservation_error(exc: ReservationError, log_message: str) -> NoReturn:
    logger.warning("%s: %s", log_message, exc)
    raise reservation_error_to_http(exc) from exc


def get_restaurant_context(restaurant_id: str, db: Session = Depends(get_db)) -> RestaurantContext:
    try:
        return load_restaurant_context(db, restaurant_id)
    except ReservationError as e:
        _handle_reservation_error(e, "Restaurant lookup failed")


def get_zenchef_client(ctx: RestaurantContext = Depends(get_restaurant_context)) -> ZenchefClient:
    return client_for(ctx.zenchef_id, ctx.api_token)


def get_reservation_service(
    ctx: RestaurantContext = Depends(get_restaurant_context),
    client: ZenchefClient = Depends(get_zenchef_client),
) -> ReservationService:
    return ReservationService(client, ctx)


@router.post("/availability", response_model=dict)
def check_availability(body: AvailabilityRequest, service: ReservationService = Depends(get_reservation_service)):
    """Availability for a party size on a date, optionally at a specific time."""
    try:
        result = service.check_availability(body.date, body.party_size, body.time)
    except ReservationError as e:
        _handle_reservation_error(e, "Availability check failed")
    if result.requires_escalation:
        description = describe_escalation(
            body.date, body.party_size, service.context.max_escalation_seating, body.time
        )
    else:
        description = describe_availability(result, body.date, body.party_size, body.time)
    return {**result.to_dict(), "description": description}


@router.get("/reservations", response_model=dict)
def search_reservations(
    phone: str | None = Query(None),
    email: str | None = Query(None),
    date: datetime.date | None = Query(None),
    name: str | None = Query(None),
    service: ReservationService = Depends(get_reservation_service),
):
    """Find reservations by phone, email, date and/or approximate name."""
    try:
        bookings = service.search_reservations(phone=phone, email=email, day=date, name=name)
    except ReservationError as e:
        _handle_reservation_error(e, "Reservation search failed")
    return {"reservations": [summary_dict(b) for b in bookings], "count": len(bookings)}


@router.get("/reservations/{booking_id}", response_model=dict)
def get_reservation(booking_id: str, service: ReservationService = Depends(get_reservation_service)):
    try:
        view = service.get_reservation(booking_id)
    except ReservationError as e:
        _handle_reservation_error(e, "Reservation lookup failed")
    return view.to_dict()


@router.post("/reservations", response_model=dict)
def create_reservation(
    body: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    request = ReservationRequest(
        party_size=body.party_size,
        phone=body.phone,
        name=body.name,
        day=body.date,
        time=body.time,
        comments=body.comments,
        email=body.email,
        seating_area_id=body.seating_area_id,
        allergies=body.allergies,
        offer_id=body.offer_id,
    )
    try:
        outcome = service.create_reservation(request)
    except ReservationError as e:
        _handle_reservation_error(e, "Create reservation failed")
    return {**outcome.to_dict(), "description": outcome.describe(created=True)}


@router.put("/reservations/{booking_id}", response_model=dict)
def update_reservation(
    booking_id: str,
    body: UpdateReservationRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    """Partial update: only the fields sent are changed."""
    changes = ReservationChanges(
        party_size=body.party_size,
        phone=body.phone,
        name=body.name,
        day=body.date,
        time=body.time,
        comments=body.comments,
        email=body.email,
        seating_area_id=body.seating_area_id,
        allergies=body.allergies,
        offer_id=body.offer_id,
    )
    try:
        outcome = service.update_reservation(booking_id, changes)
    except ReservationError as e:
        _handle_reservation_error(e, "Update reservation failed")
    return {**outcome.to_dict(), "description": outcome.describe(created=False)}


@router.post("/reservations/{booking_id}/cancel", response_model=dict)
def cancel_reservation(booking_id: str, service: ReservationService = Depends(get_reservation_service)):
    try:
        result = service.cancel_reservation(booking_id)
    except ReservationError as e:
        _handle_reservation_error(e, "Cancel reservation failed")
    return {**result, "description": f"Reservation {booking_id} has been canceled."}
