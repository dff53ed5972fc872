from datetime import timedelta

import pytest

from app.core.errors import (
    BookingNotFoundError,
    EscalationRequiredError,
    InvalidOfferError,
    OfferRequiredError,
    SlotNoLongerAvailableError,
    ZenchefApiError,
)
from app.services.reservations.service import ReservationChanges, ReservationRequest, ReservationService
from tests.factories import DAY, NOW, raw_booking, raw_offer, raw_shift, raw_slot


@pytest.fixture
def service(fake_client, ctx):
    return ReservationService(fake_client, ctx)


def _request(**overrides) -> ReservationRequest:
    values = dict(party_size=2, phone="06 12 34 56 78", name="Jean Dupont", day=DAY, time="19:00")
    values.update(overrides)
    return ReservationRequest(**values)


def _offer_day(fake_client):
    fake_client.feed.days[DAY] = [
        raw_shift("Dinner", [raw_slot("19:00"), raw_slot("20:00")], is_offer_required=True, offers=[raw_offer(7, "Tasting")])
    ]


def test_check_availability_uses_client_feed(service, fake_client) -> None:
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")])]

    result = service.check_availability(DAY, 2, "19:00", now=NOW)

    assert result.is_requested_slot_available is True
    assert fake_client.feed.calls == [(DAY, DAY)]


def test_create_builds_payload_with_normalized_phone_and_room(service, fake_client) -> None:
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")])]

    outcome = service.create_reservation(_request(seating_area_id="terrace", comments="Window"), now=NOW)

    payload = fake_client.called("create_booking")[0]
    assert payload["phone_number"] == "+33612345678"
    assert payload["firstname"] == "Jean" and payload["lastname"] == "Dupont"
    assert payload["wish"] == {"booking_room_id": 102}
    assert payload["status"] == "confirmed"
    assert payload["comment"] == "Window"
    assert "booking_offers" not in payload
    assert outcome.booking_id == "5001"
    assert outcome.prepayment_required is False
    assert "Successfully created a new reservation." in outcome.describe(created=True)


def test_create_with_unknown_seating_area_has_no_preference(service, fake_client) -> None:
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")])]

    service.create_reservation(_request(seating_area_id="rooftop"), now=NOW)

    assert "wish" not in fake_client.called("create_booking")[0]


def test_create_requires_offer_when_slot_does(service, fake_client) -> None:
    _offer_day(fake_client)

    with pytest.raises(OfferRequiredError) as exc_info:
        service.create_reservation(_request(), now=NOW)

    assert exc_info.value.valid_offer_ids == [7]
    assert fake_client.called("create_booking") == []


def test_create_rejects_offer_outside_required_ids(service, fake_client) -> None:
    _offer_day(fake_client)

    with pytest.raises(InvalidOfferError):
        service.create_reservation(_request(offer_id=99), now=NOW)


def test_create_with_valid_offer(service, fake_client) -> None:
    _offer_day(fake_client)

    outcome = service.create_reservation(_request(offer_id=7), now=NOW)

    assert fake_client.called("create_booking")[0]["booking_offers"] == [{"offer_id": 7, "count": 2}]
    assert outcome.offer_name == "Tasting"


@pytest.mark.parametrize("status", [400, 409, 412])
def test_create_race_becomes_slot_no_longer_available(service, fake_client, status) -> None:
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")])]
    fake_client.errors["create_booking"] = ZenchefApiError("Not available", status_code=status)

    with pytest.raises(SlotNoLongerAvailableError, match="no availability for 2025-06-14 date and 19:00 time"):
        service.create_reservation(_request(), now=NOW)


def test_create_other_upstream_error_propagates(service, fake_client) -> None:
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")])]
    fake_client.errors["create_booking"] = ZenchefApiError("boom", status_code=500)

    with pytest.raises(ZenchefApiError):
        service.create_reservation(_request(), now=NOW)


def test_create_with_prepayment_fetches_payment_link(service, fake_client) -> None:
    prepayment = {"is_web_booking_askable": True, "min_guests": 1, "charge_per_guest": 2000}
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00")], prepayment_param=prepayment)]

    def create_with_link(payload):
        fake_client.calls.append(("create_booking", payload))
        fake_client.bookings["777"] = {"id": 777, "url": "https://pay.test/777"}
        return {"id": 777}

    fake_client.create_booking = create_with_link

    outcome = service.create_reservation(_request(), now=NOW)

    assert outcome.prepayment_required is True
    assert outcome.prepayment_url == "https://pay.test/777"


def test_update_time_only_uses_change_time(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking()
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00"), raw_slot("20:30")])]

    outcome = service.update_reservation("1001", ReservationChanges(time="20:30"), now=NOW)

    assert outcome.mode == "time-only"
    assert fake_client.called("change_time") == [("1001", {"time": "20:30"})]
    assert fake_client.called("update_booking") == []


def test_update_time_with_comment_and_seating_is_full_rewrite(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking(comment="Window seat")
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("19:00"), raw_slot("20:30")])]

    outcome = service.update_reservation(
        "1001",
        ReservationChanges(time="20:30", comments="Birthday cake", seating_area_id="main"),
        now=NOW,
    )

    assert outcome.mode == "full"
    assert fake_client.called("change_time") == []
    _, payload = fake_client.called("update_booking")[0]
    assert payload["time"] == "20:30"
    assert payload["comment"] == "Birthday cake"
    assert payload["wish"] == {"booking_room_id": 101}


def test_update_guest_count_is_full_rewrite(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking(wish={"booking_room_id": 101})

    outcome = service.update_reservation("1001", ReservationChanges(party_size=4), now=NOW)

    assert outcome.mode == "full"
    booking_id, payload = fake_client.called("update_booking")[0]
    assert booking_id == "1001"
    assert payload["nb_guests"] == 4
    assert payload["time"] == "19:00"
    assert payload["wish"] == {"booking_room_id": 101}
    assert payload["phone_number"] == "+33612345678"
    # availability is only re-checked when date or time change
    assert fake_client.feed.calls == []


def test_update_reuses_existing_offer_for_required_slot(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking(booking_offers=[{"offer_id": 7}])
    _offer_day(fake_client)

    outcome = service.update_reservation("1001", ReservationChanges(time="20:00"), now=NOW)

    assert outcome.mode == "time-only"
    assert outcome.draft.offer_id == 7


def test_update_to_offer_slot_without_offer_fails(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking()
    _offer_day(fake_client)

    with pytest.raises(OfferRequiredError):
        service.update_reservation("1001", ReservationChanges(time="20:00"), now=NOW)


def test_update_race_becomes_slot_no_longer_available(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking()
    fake_client.feed.days[DAY] = [raw_shift("Dinner", [raw_slot("20:30")])]
    fake_client.errors["change_time"] = ZenchefApiError("taken", status_code=400)

    with pytest.raises(SlotNoLongerAvailableError):
        service.update_reservation("1001", ReservationChanges(time="20:30"), now=NOW)


def test_update_unknown_booking(service, fake_client) -> None:
    fake_client.errors["get_booking"] = ZenchefApiError("Not found", status_code=404)

    with pytest.raises(BookingNotFoundError):
        service.update_reservation("404", ReservationChanges(time="20:00"), now=NOW)


def test_search_normalizes_phone_and_ranks(service, fake_client) -> None:
    fake_client.search_result = [
        raw_booking(id=1, day=DAY + timedelta(days=6), status="canceled"),
        raw_booking(id=2, day=DAY + timedelta(days=20)),
        raw_booking(id=3, day=DAY - timedelta(days=30)),
    ]

    bookings = service.search_reservations(phone="06 12 34 56 78", today=DAY)

    call = fake_client.called("search_bookings")[0]
    assert ("phone_number", "=", "+33612345678") in call["filters"]
    assert call["filters"][0] == ("reservation_type", "=", "reservation")
    assert call["limit"] == 100
    assert [b.id for b in bookings] == ["2", "1"]


def test_search_not_found_upstream_is_empty(service, fake_client) -> None:
    fake_client.errors["search_bookings"] = ZenchefApiError("Not found", status_code=404)

    assert service.search_reservations(email="x@y.z") == []


def test_get_reservation_view(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking(status="waiting")

    view = service.get_reservation("1001", today=DAY)

    assert view.status_description == "Waiting for confirmation"
    assert view.can_cancel is True


def test_get_reservation_missing(service, fake_client) -> None:
    with pytest.raises(BookingNotFoundError):
        service.get_reservation("nope", today=DAY)


def test_cancel_reservation(service, fake_client) -> None:
    assert service.cancel_reservation("1001") == {"bookingId": "1001", "status": "canceled"}
    assert fake_client.called("change_status") == [("1001", "canceled")]


def test_create_for_escalated_party_is_refused(service, fake_client) -> None:
    with pytest.raises(EscalationRequiredError) as exc:
        service.create_reservation(_request(party_size=8), now=NOW)

    assert exc.value.threshold == 8
    assert fake_client.feed.calls == []
    assert fake_client.called("create_booking") == []


def test_update_to_escalated_party_is_refused(service, fake_client) -> None:
    fake_client.bookings["1001"] = raw_booking()

    with pytest.raises(EscalationRequiredError):
        service.update_reservation("1001", ReservationChanges(party_size=10), now=NOW)

    assert fake_client.called("update_booking") == []
