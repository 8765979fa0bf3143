import re
from typing import Iterable, Optional

FLIGHT_KEYWORDS = [
    'flight', 'fly', 'book', 'travel', 'trip', 'airport',
    'departure', 'destination', 'origin', 'airline', 'booking',
    'ticket', 'journey', 'vacation', 'holiday', 'getaway',
]

FLIGHT_PHRASES = [
    'flight details', 'search flight', 'find flight', 'book flight',
    'flight search', 'flight booking', 'airline ticket', 'plane ticket',
    'air travel', 'round trip', 'one way', 'return flight',
    'business class', 'economy class', 'first class',
]

TRAVEL_PATTERN = re.compile(r"\b(from|to)\b", re.IGNORECASE)
IATA_TOKEN = re.compile(r"\b[A-Z]{3}\b")


def _mentions_place(text: str, lower: str, places: Iterable[str], codes: Iterable[str]) -> bool:
    known = set(codes)
    if any(token in known for token in IATA_TOKEN.findall(text)):
        return True
    return any(re.search(rf"\b{re.escape(p)}\b", lower) for p in places if p)


def is_flight_request(text: Optional[str], places: Iterable[str] = (),
                      codes: Iterable[str] = ()) -> bool:
    """Cheap routing check: should this message go to the flight pipeline?

    True on a flight keyword or phrase, or on a from/to pattern that names a
    known place: an all-caps token found in `codes` or one of `places`.
    Other capitalised words ('USA', 'CEO') are not places.
    """
    if not text:
        return False
    lower = text.lower()
    if any(re.search(rf"\b{k}", lower) for k in FLIGHT_KEYWORDS):
        return True
    if any(p in lower for p in FLIGHT_PHRASES):
        return True
    return bool(TRAVEL_PATTERN.search(lower)) and _mentions_place(text, lower, places, codes)
