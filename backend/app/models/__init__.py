from app.models.restaurant import Restaurant
from app.models.seating_area import RestaurantSeatingArea

__all__ = [
    "Restaurant",
    "RestaurantSeatingArea",
]
