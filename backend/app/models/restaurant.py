"""Restaurant configuration: Zenchef credentials and the manager-escalation threshold."""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    name = Column(String(256), nullable=False)
    zenchef_id = Column(String(64), nullable=True)
    zenchef_api_token = Column(String(512), nullable=True)
    # Parties of this size or larger are escalated to a manager, never auto-booked
    max_escalation_seating = Column(Integer, nullable=False, server_default="8")
    timezone = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    seating_areas = relationship(
        "RestaurantSeatingArea",
        back_populates="restaurant",
        order_by="RestaurantSeatingArea.name",
    )
