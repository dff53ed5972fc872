"""Seating area known internally, linked to a Zenchef room by zenchef_room_id."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class RestaurantSeatingArea(Base):
    __tablename__ = "seating_areas"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    zenchef_room_id = Column(Integer, nullable=False)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    max_capacity = Column(Integer, nullable=False, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    restaurant = relationship("Restaurant", back_populates="seating_areas")
