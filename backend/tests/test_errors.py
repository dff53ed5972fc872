import pytest

from app.core.errors import (
    AvailabilityCheckError,
    BookingNotFoundError,
    CredentialsNotConfiguredError,
    EscalationRequiredError,
    InvalidOfferError,
    OfferRequiredError,
    ReservationError,
    RestaurantNotFoundError,
    SlotNoLongerAvailableError,
    ZenchefApiError,
    extract_error_message,
    reservation_error_to_http,
)


@pytest.mark.parametrize(
    "exc, status",
    [
        (RestaurantNotFoundError("r1"), 404),
        (BookingNotFoundError("b1"), 404),
        (CredentialsNotConfiguredError(), 412),
        (SlotNoLongerAvailableError("2025-06-14", "19:00"), 409),
        (EscalationRequiredError(10, 8), 422),
        (OfferRequiredError([1, 2]), 422),
        (InvalidOfferError(3, [1, 2]), 422),
        (AvailabilityCheckError(RuntimeError("boom")), 502),
        (ZenchefApiError("bad gateway", 500), 502),
        (ReservationError("other"), 500),
        (ValueError("unexpected"), 500),
    ],
)
def test_error_rules(exc, status) -> None:
    http = reservation_error_to_http(exc)

    assert http.status_code == status
    assert http.detail == str(exc)


def test_user_facing_messages() -> None:
    assert str(SlotNoLongerAvailableError("2025-06-14", "19:00")) == (
        "There is no availability for 2025-06-14 date and 19:00 time anymore"
    )
    assert str(OfferRequiredError([])).endswith("Valid offer IDs: none")
    assert str(InvalidOfferError(3, [1, 2])) == "Invalid offer ID 3. Valid offers for this slot: 1, 2"
    assert str(AvailabilityCheckError(RuntimeError("boom"))) == "Failed to check availability: boom"


def test_extract_error_message_order() -> None:
    assert extract_error_message({"message": "m", "error": "e"}) == "m"
    assert extract_error_message({"error": "e"}) == "e"
    assert extract_error_message({"errors": {"day": ["invalid"]}}) == '{"day": ["invalid"]}'
    assert extract_error_message(None, "raw text") == "raw text"
    assert extract_error_message({}, "") == "Unknown error"
