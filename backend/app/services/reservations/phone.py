"""Phone normalization for booking search and mutation payloads (French numbers by default)."""
import re

_STRIP_RE = re.compile(r"[\s\-().]")


def normalize_phone_number(phone: str | None) -> str | None:
    """
    "06 12 34 56 78" -> "+33612345678"; "33612345678" -> "+33612345678".
    Anything else is returned stripped of separators, unchanged otherwise.
    """
    if phone is None:
        return None
    cleaned = _STRIP_RE.sub("", phone)
    if not cleaned:
        return cleaned
    if cleaned.startswith("0"):
        return "+33" + cleaned[1:]
    if cleaned.startswith("33") and len(cleaned) >= 11:
        return "+" + cleaned
    return cleaned
