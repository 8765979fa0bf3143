"""Plain-text digest of ranked offers, fed to the summary model."""

from typing import List

from flightfinder.types import Offer, RankedSelection


def _format_price(offer: Offer) -> str:
    return f"{offer.price.amount:.2f} {offer.price.currency}"


def format_offer(offer: Offer, index: int) -> str:
    lines: List[str] = [f"Option {index}:"]
    for leg_index, itinerary in enumerate(offer.itineraries):
        label = "Departing" if leg_index == 0 else "Returning"
        lines.append(f"{label} flights:")
        for seg_index, segment in enumerate(itinerary.segments, start=1):
            lines.append(f"Leg {seg_index} is on {segment.carrier} leaving at {segment.departure_at}.")
    lines.append(f"Price: {_format_price(offer)}")
    return "\n".join(lines)


def format_offer_digest(selection: RankedSelection) -> str:
    return "\n\n".join(format_offer(o, i) for i, o in enumerate(selection.offers, start=1))
