"""
Availability engine: raw Zenchef feed -> one yes/no/alternatives answer for a party size.

- parse: typed boundary for the raw feed.
- seating / offers / slots / next_date: the rule components.
- orchestrator.check_availability: escalation gate + composition.
- describe: LLM-friendly text for the voice agent.
"""
from app.services.availability.describe import describe_availability, describe_escalation
from app.services.availability.next_date import find_next_available_date
from app.services.availability.offers import resolve_offer_requirements
from app.services.availability.orchestrator import check_availability, requires_escalation
from app.services.availability.parse import parse_availability_feed
from app.services.availability.seating import map_seating_areas
from app.services.availability.slots import normalize_time, resolve_day_slots
from app.services.availability.types import (
    AvailabilityResult,
    FeedFetcher,
    NextAvailableDate,
    Offer,
    RestaurantContext,
    SeatingArea,
    SeatingAreaInfo,
    Shift,
    Slot,
    TimeSlot,
)

__all__ = [
    "AvailabilityResult",
    "FeedFetcher",
    "NextAvailableDate",
    "Offer",
    "RestaurantContext",
    "SeatingArea",
    "SeatingAreaInfo",
    "Shift",
    "Slot",
    "TimeSlot",
    "check_availability",
    "describe_availability",
    "describe_escalation",
    "find_next_available_date",
    "map_seating_areas",
    "normalize_time",
    "parse_availability_feed",
    "requires_escalation",
    "resolve_day_slots",
    "resolve_offer_requirements",
]
