"""Reservations: booking boundary, search ranking, mutation planning, and the service that composes them."""
from app.services.reservations.booking import Booking, BookingView, parse_booking
from app.services.reservations.mutation import BookingDraft, MutationPlan, plan_update, split_name
from app.services.reservations.phone import normalize_phone_number
from app.services.reservations.search import SearchFilters, rank_bookings
from app.services.reservations.service import (
    ReservationChanges,
    ReservationOutcome,
    ReservationRequest,
    ReservationService,
)

__all__ = [
    "Booking",
    "BookingDraft",
    "BookingView",
    "MutationPlan",
    "ReservationChanges",
    "ReservationOutcome",
    "ReservationRequest",
    "ReservationService",
    "SearchFilters",
    "normalize_phone_number",
    "parse_booking",
    "plan_update",
    "rank_bookings",
    "split_name",
]
