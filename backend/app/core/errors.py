"""
Centralized error handling for reservation and availability failures.
Exception taxonomy plus a rule table so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

import json
from typing import Any

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409  # slot taken between availability check and mutation
STATUS_PRECONDITION_FAILED = 412  # restaurant not configured for the booking platform
STATUS_UNPROCESSABLE = 422
STATUS_BAD_GATEWAY = 502  # booking platform failed
STATUS_INTERNAL_ERROR = 500

MSG_CREDENTIALS_NOT_CONFIGURED = "Restaurant Zenchef credentials not configured"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ReservationError(Exception):
    """Base exception for everything the reservation engine surfaces to callers."""


class RestaurantNotFoundError(ReservationError):
    def __init__(self, restaurant_id: str):
        self.restaurant_id = restaurant_id
        super().__init__(f"Restaurant {restaurant_id} not found")


class CredentialsNotConfiguredError(ReservationError):
    """Configuration error: surfaced immediately, never retried."""

    def __init__(self, message: str = MSG_CREDENTIALS_NOT_CONFIGURED):
        super().__init__(message)


class ZenchefApiError(ReservationError):
    """Non-2xx or transport failure from the booking platform."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AvailabilityCheckError(ReservationError):
    """A feed fetch failed; wraps the cause as a single 'failed to check availability'."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to check availability: {cause}")


class SlotNoLongerAvailableError(ReservationError):
    """Race: the slot was taken between the availability check and the mutation."""

    def __init__(self, date_str: str, time: str):
        self.date_str = date_str
        self.time = time
        super().__init__(f"There is no availability for {date_str} date and {time} time anymore")


class EscalationRequiredError(ReservationError):
    """Party at or above the restaurant's escalation threshold: a manager must handle it."""

    def __init__(self, party_size: int, threshold: int):
        self.party_size = party_size
        self.threshold = threshold
        super().__init__(
            f"A party of {party_size} cannot be booked automatically (limit is {threshold - 1}); "
            "the restaurant manager must be contacted"
        )


class OfferRequiredError(ReservationError):
    def __init__(self, valid_offer_ids: list[int]):
        self.valid_offer_ids = valid_offer_ids
        ids = ", ".join(str(i) for i in valid_offer_ids) or "none"
        super().__init__(f"An offer must be selected for this time slot. Valid offer IDs: {ids}")


class InvalidOfferError(ReservationError):
    def __init__(self, offer_id: int, valid_offer_ids: list[int]):
        self.offer_id = offer_id
        self.valid_offer_ids = valid_offer_ids
        ids = ", ".join(str(i) for i in valid_offer_ids)
        super().__init__(f"Invalid offer ID {offer_id}. Valid offers for this slot: {ids}")


class BookingNotFoundError(ReservationError):
    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


def extract_error_message(body: Any, fallback: str = "Unknown error") -> str:
    """Best message from a Zenchef error body: message, then error, then errors (JSON)."""
    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        if body.get("error"):
            return str(body["error"])
        if body.get("errors"):
            return json.dumps(body["errors"])
    return fallback or "Unknown error"


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

RESERVATION_ERROR_RULES: list[tuple[type[ReservationError], int]] = [
    (RestaurantNotFoundError, STATUS_NOT_FOUND),
    (BookingNotFoundError, STATUS_NOT_FOUND),
    (CredentialsNotConfiguredError, STATUS_PRECONDITION_FAILED),
    (SlotNoLongerAvailableError, STATUS_CONFLICT),
    (EscalationRequiredError, STATUS_UNPROCESSABLE),
    (OfferRequiredError, STATUS_UNPROCESSABLE),
    (InvalidOfferError, STATUS_UNPROCESSABLE),
    (AvailabilityCheckError, STATUS_BAD_GATEWAY),
    (ZenchefApiError, STATUS_BAD_GATEWAY),
]


def reservation_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from the reservation service into an HTTPException.
    Uses RESERVATION_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code in RESERVATION_ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
