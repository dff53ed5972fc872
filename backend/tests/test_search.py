from datetime import date, timedelta

from app.services.reservations.booking import parse_booking
from app.services.reservations.search import SearchFilters, build_search_filters, matches_name, rank_bookings
from tests.factories import raw_booking

TODAY = date(2025, 6, 10)


def _b(id, days_from_today, status="confirmed", firstname="Jean", lastname="Dupont"):
    return parse_booking(
        raw_booking(id=id, day=TODAY + timedelta(days=days_from_today), status=status, firstname=firstname, lastname=lastname)
    )


def test_stale_bookings_are_dropped() -> None:
    ranked = rank_bookings([_b(1, -10), _b(2, 0), _b(3, -7)], SearchFilters(), TODAY)

    assert [b.id for b in ranked] == ["2", "3"]


def test_confirmed_tier_precedes_closer_other_statuses() -> None:
    ranked = rank_bookings([_b(1, 2, "no_shown"), _b(2, 20, "confirmed")], SearchFilters(), TODAY)

    assert [b.id for b in ranked] == ["2", "1"]


def test_within_tier_closest_day_first_past_or_future() -> None:
    bookings = [_b(1, 10), _b(2, -3), _b(3, 1), _b(4, 0, "canceled"), _b(5, 5, "waiting")]

    ranked = rank_bookings(bookings, SearchFilters(), TODAY)

    assert [b.id for b in ranked] == ["3", "2", "1", "5", "4"]


def test_ranking_is_stable_and_idempotent() -> None:
    bookings = [_b(1, 3), _b(2, -3), _b(3, 3), _b(4, 3, "waiting")]

    first = rank_bookings(bookings, SearchFilters(), TODAY)
    second = rank_bookings(bookings, SearchFilters(), TODAY)

    assert [b.id for b in first] == [b.id for b in second] == ["1", "2", "3", "4"]


def test_fuzzy_name_match_tolerates_typos() -> None:
    booking = _b(1, 1, firstname="Jonathan", lastname="Smith")

    assert matches_name("Jonathan Smith", booking)
    assert matches_name("jonathan smiht", booking)
    assert matches_name("Smith", booking)
    assert matches_name("Smith Jonathan", booking)
    assert not matches_name("Marie Curie", booking)


def test_short_first_name_matches_compound_first_name() -> None:
    booking = _b(1, 1, firstname="Jean-Pierre", lastname="Dupont")

    assert matches_name("Jean", booking)
    assert matches_name("Pierre Dupont", booking)
    assert not matches_name("Alice Martin", booking)


def test_name_filter_drops_without_reordering() -> None:
    bookings = [
        _b(1, 5, firstname="Jean", lastname="Dupond"),
        _b(2, 1, firstname="Alice", lastname="Martin"),
        _b(3, 2, firstname="Jean", lastname="Dupont"),
    ]

    ranked = rank_bookings(bookings, SearchFilters(name="Jean Dupont"), TODAY)

    assert [b.id for b in ranked] == ["3", "1"]


def test_server_side_filters() -> None:
    filters = build_search_filters(SearchFilters(phone="+33612345678", email="a@b.c", day=TODAY, name="x"))

    assert filters == [
        ("reservation_type", "=", "reservation"),
        ("phone_number", "=", "+33612345678"),
        ("email", "=", "a@b.c"),
        ("day", "=", "2025-06-10"),
    ]
