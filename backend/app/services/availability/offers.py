"""Offer requirements: which offers are valid for a party size, and which slots require one."""
import logging

from app.services.availability.slots import normalize_time
from app.services.availability.types import Offer, OfferResolution, Shift

logger = logging.getLogger(__name__)


def _shift_requires_offer(shift: Shift, party_size: int) -> bool:
    if not shift.is_offer_required:
        return False
    if shift.offer_required_from_pax is not None and party_size < shift.offer_required_from_pax:
        return False
    return True


def resolve_offer_requirements(shifts: list[Shift], party_size: int) -> OfferResolution:
    """
    Offers stay None unless at least one shift requires offers for this party size;
    an empty list then means "offers apply but none match".
    Required ids per slot name are deduplicated and only recorded for open slots.
    """
    offers_by_id: dict[int, Offer] | None = None
    required: dict[str, list[int]] = {}
    for shift in shifts:
        if not _shift_requires_offer(shift, party_size):
            continue
        if offers_by_id is None:
            offers_by_id = {}
        matching = [o for o in shift.offers if not o.is_private and o.accepts_party_size(party_size)]
        for offer in matching:
            offers_by_id.setdefault(offer.id, offer)
            for slot in shift.slots:
                if not slot.is_open:
                    continue
                ids = required.setdefault(normalize_time(slot.name) or slot.name, [])
                if offer.id not in ids:
                    ids.append(offer.id)
        logger.debug(
            "Shift %s requires an offer for %s guests: %s matching offer(s)",
            shift.name,
            party_size,
            len(matching),
        )
    return OfferResolution(
        offers=list(offers_by_id.values()) if offers_by_id is not None else None,
        required_offer_ids_by_slot=required,
    )
