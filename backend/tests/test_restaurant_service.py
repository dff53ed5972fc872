import pytest

from app.core.errors import RestaurantNotFoundError
from app.models import Restaurant
from app.services.restaurant_service import load_restaurant_context


def test_loads_context_with_seating_areas(seeded_db) -> None:
    ctx = load_restaurant_context(seeded_db, "resto-1")

    assert ctx.restaurant_id == "resto-1"
    assert ctx.zenchef_id == "zc-1"
    assert ctx.api_token == "token-1"
    assert ctx.max_escalation_seating == 8
    assert ctx.timezone == "Europe/Paris"
    assert [a.id for a in ctx.seating_areas] == ["main", "salon", "terrace"]
    assert {a.id: a.external_room_id for a in ctx.seating_areas}["terrace"] == 102


def test_missing_restaurant(db_session) -> None:
    with pytest.raises(RestaurantNotFoundError):
        load_restaurant_context(db_session, "unknown")


def test_missing_credentials_and_timezone_fall_back(db_session) -> None:
    db_session.add(Restaurant(id="resto-2", name="No creds", max_escalation_seating=10))
    db_session.commit()

    ctx = load_restaurant_context(db_session, "resto-2")

    assert ctx.zenchef_id == ""
    assert ctx.api_token == ""
    assert ctx.timezone == "Europe/Paris"
    assert ctx.seating_areas == []
