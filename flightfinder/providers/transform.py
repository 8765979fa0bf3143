from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from flightfinder.obs.logger import log_event
from flightfinder.types import Itinerary, Offer, Price, Segment


def _amount(value: Any) -> Optional[Decimal]:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None


def _amadeus_segment(s: Dict[str, Any], carriers: Dict[str, str]) -> Segment:
    code = s.get("carrierCode") or s.get("operating", {}).get("carrierCode") or "N/A"
    return Segment(
        carrier_code=code,
        carrier_name=carriers.get(code),
        departure_at=s["departure"]["at"],
        origin=s["departure"].get("iataCode"),
        destination=(s.get("arrival") or {}).get("iataCode"),
    )


def from_amadeus(json_obj: Dict[str, Any]) -> List[Offer]:
    """Flight Offers Search response -> offers; malformed records are skipped."""
    carriers = (json_obj.get("dictionaries") or {}).get("carriers") or {}
    items = []
    for o in json_obj.get("data", []) or []:
        try:
            price = o["price"]
            amount = _amount(price.get("grandTotal") or price.get("total"))
            if amount is None:
                raise ValueError("offer has no numeric price")
            items.append(Offer(
                id=str(o.get("id", "")),
                price=Price(amount=amount, currency=price.get("currency", "USD")),
                itineraries=tuple(
                    Itinerary(segments=tuple(_amadeus_segment(s, carriers) for s in itin["segments"]))
                    for itin in o["itineraries"]
                ),
                raw=o,
            ))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            log_event("offer_skipped", level="WARNING", provider="amadeus", offer_id=o.get("id"), error=str(e))
    return items


def _duffel_segment(s: Dict[str, Any]) -> Segment:
    carrier = s.get("operating_carrier") or s.get("marketing_carrier") or {}
    return Segment(
        carrier_code=carrier.get("iata_code") or "N/A",
        carrier_name=carrier.get("name"),
        departure_at=s["departing_at"],
        origin=(s.get("origin") or {}).get("iata_code"),
        destination=(s.get("destination") or {}).get("iata_code"),
    )


def from_duffel(json_obj: Dict[str, Any]) -> List[Offer]:
    """Offer request response -> offers; malformed records are skipped."""
    items = []
    for o in (json_obj.get("data") or {}).get("offers", []) or []:
        try:
            amount = _amount(o.get("total_amount"))
            if amount is None:
                raise ValueError("offer has no numeric price")
            items.append(Offer(
                id=str(o.get("id", "")),
                price=Price(amount=amount, currency=o.get("total_currency") or "USD"),
                itineraries=tuple(
                    Itinerary(segments=tuple(_duffel_segment(s) for s in slc["segments"]))
                    for slc in o["slices"]
                ),
                raw=o,
            ))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            log_event("offer_skipped", level="WARNING", provider="duffel", offer_id=o.get("id"), error=str(e))
    return items
