"""
Restaurant configuration: DB rows -> RestaurantContext passed into the availability engine.
"""
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.core.errors import RestaurantNotFoundError
from app.models.restaurant import Restaurant
from app.models.seating_area import RestaurantSeatingArea
from app.services.availability.types import RestaurantContext, SeatingArea

logger = logging.getLogger(__name__)


def _to_seating_area(row: RestaurantSeatingArea) -> SeatingArea:
    return SeatingArea(
        id=row.id,
        external_room_id=row.zenchef_room_id,
        name=row.name,
        description=row.description,
        max_capacity=row.max_capacity or 0,
    )


def load_restaurant_context(db: Session, restaurant_id: str) -> RestaurantContext:
    """Restaurant config and its seating areas. Missing credentials are left empty; the client rejects them."""
    row = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if row is None:
        raise RestaurantNotFoundError(restaurant_id)
    areas = (
        db.query(RestaurantSeatingArea)
        .filter(RestaurantSeatingArea.restaurant_id == restaurant_id)
        .order_by(RestaurantSeatingArea.name)
        .all()
    )
    ctx = RestaurantContext(
        restaurant_id=row.id,
        max_escalation_seating=row.max_escalation_seating,
        seating_areas=[_to_seating_area(a) for a in areas],
        zenchef_id=row.zenchef_id or "",
        api_token=row.zenchef_api_token or "",
        timezone=row.timezone or settings.default_timezone,
        name=row.name or "",
    )
    logger.debug(
        "Loaded restaurant %s: escalation=%s seating_areas=%s",
        restaurant_id,
        ctx.max_escalation_seating,
        len(ctx.seating_areas),
    )
    return ctx
