"""Sectioned, LLM-friendly text for an AvailabilityResult (read out by the voice agent)."""
from datetime import date

from app.services.availability.types import AvailabilityResult, SeatingAreaInfo

OFFER_DESCRIPTION_MAX = 100


def _money(cents: int, symbol: str) -> str:
    amount = cents / 100
    return f"{symbol}{int(amount)}" if amount == int(amount) else f"{symbol}{amount:.2f}"


def _truncate(text: str, limit: int = OFFER_DESCRIPTION_MAX) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _room_line(idx: int, room: SeatingAreaInfo, with_flags: bool = True) -> str:
    line = f"  {idx}. {room.name} (ID: {room.id}, Capacity: {room.max_capacity}"
    if room.description:
        line += f", {room.description}"
    line += ")"
    if with_flags and room.payment_required_for_confirmation:
        line += " [PREPAYMENT]"
    if with_flags and room.not_cancellable:
        line += " [NON-CANCELLABLE]"
    return line


def describe_escalation(day: date, party_size: int, threshold: int, time: str | None = None) -> str:
    at = f" at {time}" if time else ""
    return (
        "RESERVATION REQUIRES MANAGER CONTACT\n\n"
        f"Party Size: {party_size} guests\n"
        f"Requested Date: {day.isoformat()}{at}\n\n"
        f"IMPORTANT: Reservations for {threshold} or more guests cannot be made through the automated system. "
        "The customer must contact the restaurant manager directly to arrange this reservation.\n\n"
        f"Please inform the customer that they need to speak with a manager for large party bookings ({threshold}+ guests). "
        "The manager will be able to accommodate their needs and discuss special arrangements for larger groups."
    )


def describe_availability(
    result: AvailabilityResult,
    day: date,
    party_size: int,
    time: str | None = None,
    currency_symbol: str = "€",
) -> str:
    day_str = day.isoformat()
    slots = result.other_available_slots_for_that_day
    parts: list[str] = [f"AVAILABILITY CHECK: {party_size} guests on {day_str}{f' at {time}' if time else ''}"]

    if time is not None:
        if result.is_requested_slot_available:
            parts.append(f"\nREQUESTED TIME STATUS: AVAILABLE at {time}")
            rooms = result.available_room_types_on_requested_time or []
            if rooms:
                parts.append(f"SEATING OPTIONS FOR {time}:")
                parts.extend(_room_line(i, r) for i, r in enumerate(rooms, 1))
            else:
                parts.append("WARNING: Time is available but no configured seating areas found in system.")
        else:
            parts.append(f"\nREQUESTED TIME STATUS: NOT AVAILABLE at {time}")

    payment_slot = next((s for s in slots if s.payment_required), None)
    has_non_cancellable = any(s.not_cancellable for s in slots)
    any_offer_required = any(s.is_offer_required for s in slots)

    if payment_slot is not None:
        charge = payment_slot.payment_required or 0
        parts.append("\nPREPAYMENT NOTICE:")
        parts.append(f"A prepayment of {_money(charge, currency_symbol)} per person is required for this booking.")
        parts.append(f"Total prepayment: {_money(charge * party_size, currency_symbol)}")
        parts.append("After booking, a payment link will be sent to the customer's email.")
        parts.append("The reservation will remain PENDING until payment is completed.")

    if has_non_cancellable:
        parts.append("\nCANCELLATION RESTRICTION:")
        parts.append('Some time slots are marked as "notCancellable: true" in their seating areas.')
        parts.append("Bookings for these slots cannot be cancelled by the customer after creation.")

    if any_offer_required:
        parts.append("\nOFFER REQUIREMENT:")
        parts.append("Some time slots require selecting an offer (isOfferRequired: true).")
        parts.append('Check the "requiredOfferIds" field for valid offer IDs.')
        parts.append('Include "offerId" when creating a reservation for these slots.')

    if result.offers:
        parts.append(f"\nAVAILABLE OFFERS ({len(result.offers)} matching your party size):")
        for i, offer in enumerate(result.offers, 1):
            parts.append(f'  {i}. "{offer.name}" (ID: {offer.id})')
            if offer.description:
                parts.append(f"     {_truncate(offer.description)}")

    if slots:
        parts.append(f"\nOTHER AVAILABLE TIMES ON {day_str} ({len(slots)} slots):")
        for slot in slots:
            names = ", ".join(a.name for a in slot.seating_areas) or "No configured seating areas"
            line = f"  - {slot.time}: {len(slot.seating_areas)} seating area(s) [{names}]"
            if slot.is_offer_required:
                line += f" [OFFER REQUIRED - IDs: {', '.join(str(i) for i in slot.required_offer_ids or [])}]"
            if slot.payment_required:
                line += " [PREPAYMENT]"
            if slot.not_cancellable:
                line += " [NON-CANCELLABLE]"
            parts.append(line)
    elif result.waitlist_available:
        parts.append(f"\nOTHER AVAILABLE TIMES ON {day_str}: None available")
        parts.append("WAITING LIST: The day is full but the customer can be added to the waiting list.")
    else:
        parts.append(f"\nOTHER AVAILABLE TIMES ON {day_str}: None available")

    nxt = result.next_available_date
    if nxt is not None:
        nxt_str = nxt.date.isoformat()
        parts.append(f"\nNEXT AVAILABLE DATE: {nxt_str}")
        if nxt.seating_areas:
            parts.append(f"SEATING AREAS ON {nxt_str}:")
            parts.extend(_room_line(i, r, with_flags=False) for i, r in enumerate(nxt.seating_areas, 1))
        else:
            parts.append("WARNING: Date available but no configured seating areas found.")

    parts.append("\nIMPORTANT NOTES:")
    parts.append("- Use seating area ID when making a booking to specify preferred room")
    if any_offer_required:
        parts.append('- Include "offerId" for time slots marked with isOfferRequired: true')
    if payment_slot is not None:
        parts.append("- Bookings with prepayment will be PENDING until payment is completed")
    if has_non_cancellable:
        parts.append("- Non-cancellable bookings cannot be cancelled by the customer")

    return "\n".join(parts)
