import os

# Settings are read at import time; keep tests off the real database and Zenchef.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ZENCHEF_PUBLISHER_NAME", "test-publisher")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models import Restaurant, RestaurantSeatingArea
from tests.factories import FakeZenchefClient, context, seating_area


@pytest.fixture
def areas():
    return [
        seating_area("main", 101, "Main room", max_capacity=6),
        seating_area("terrace", 102, "Terrace", max_capacity=4),
    ]


@pytest.fixture
def ctx(areas):
    return context(areas=areas)


@pytest.fixture
def fake_client():
    return FakeZenchefClient()


@pytest.fixture
def db_session():
    """In-memory SQLite with the schema created from the models."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    db_session.add(
        Restaurant(
            id="resto-1",
            name="Chez Test",
            zenchef_id="zc-1",
            zenchef_api_token="token-1",
            max_escalation_seating=8,
            timezone="Europe/Paris",
        )
    )
    db_session.add_all(
        [
            RestaurantSeatingArea(id="terrace", restaurant_id="resto-1", zenchef_room_id=102, name="Terrace", max_capacity=4),
            RestaurantSeatingArea(id="main", restaurant_id="resto-1", zenchef_room_id=101, name="Main room", max_capacity=6),
            RestaurantSeatingArea(id="salon", restaurant_id="resto-1", zenchef_room_id=103, name="Private salon", max_capacity=12),
        ]
    )
    db_session.commit()
    return db_session
