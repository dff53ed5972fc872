"""Map external (Zenchef) room ids to internally known seating areas."""
from app.services.availability.types import SeatingArea, SeatingAreaInfo


def map_seating_areas(
    external_room_ids: list[int],
    known_areas: list[SeatingArea],
    payment_per_guest: int | None = None,
    not_cancellable: bool | None = None,
) -> list[SeatingAreaInfo]:
    """
    One SeatingAreaInfo per external id that matches a known area, in input order.
    Unknown ids are dropped: the room exists externally but is not configured here,
    so a customer could not be routed to it later.
    """
    by_room = {a.external_room_id: a for a in known_areas}
    out: list[SeatingAreaInfo] = []
    for room_id in external_room_ids:
        area = by_room.get(room_id)
        if area is None:
            continue
        out.append(SeatingAreaInfo.from_area(area, payment_per_guest, not_cancellable))
    return out


def filter_below_escalation(known_areas: list[SeatingArea], max_escalation_seating: int) -> list[SeatingArea]:
    """Areas that could alone trigger escalation are excluded from automated offers."""
    return [a for a in known_areas if a.max_capacity < max_escalation_seating]


def find_area_by_id(known_areas: list[SeatingArea], area_id: str | None) -> SeatingArea | None:
    if not area_id:
        return None
    for a in known_areas:
        if a.id == area_id:
            return a
    return None
