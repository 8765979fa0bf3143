"""Offer provider interface and the factory that picks one from settings."""

from decimal import Decimal
from typing import List, Protocol

from flightfinder.config import Settings
from flightfinder.errors import ConfigurationError
from flightfinder.types import FlightQuery, Itinerary, Offer, Price, Segment


class OfferProvider(Protocol):
    name: str

    async def search(self, query: FlightQuery) -> List[Offer]:
        ...


class MockProvider:
    """Fixed sample offer; stands in when no provider credentials are configured."""

    name = "mock"

    async def search(self, query: FlightQuery) -> List[Offer]:
        outbound = Segment(
            carrier_code="AA",
            carrier_name="American Airlines",
            departure_at=f"{query.departure_date.isoformat()}T10:30:00",
            origin=query.origin,
            destination=query.destination,
        )
        inbound = Segment(
            carrier_code="AA",
            carrier_name="American Airlines",
            departure_at=f"{query.return_date.isoformat()}T16:45:00",
            origin=query.destination,
            destination=query.origin,
        )
        return [
            Offer(
                id="mock-1",
                price=Price(amount=Decimal("299.00") * query.passengers, currency="USD"),
                itineraries=(Itinerary(segments=(outbound,)), Itinerary(segments=(inbound,))),
            )
        ]


def create_provider(settings: Settings) -> OfferProvider:
    kind = settings.resolved_provider()
    if kind == "amadeus":
        from flightfinder.providers.amadeus import AmadeusProvider
        if not (settings.AMADEUS_CLIENT_ID and settings.AMADEUS_CLIENT_SECRET):
            raise ConfigurationError("Amadeus credentials missing", setting_name="AMADEUS_CLIENT_ID")
        return AmadeusProvider(
            client_id=settings.AMADEUS_CLIENT_ID,
            client_secret=settings.AMADEUS_CLIENT_SECRET,
            env=settings.AMADEUS_ENV,
        )
    if kind == "duffel":
        from flightfinder.providers.duffel import DuffelProvider
        if not settings.DUFFEL_ACCESS_TOKEN:
            raise ConfigurationError("Duffel access token missing", setting_name="DUFFEL_ACCESS_TOKEN")
        return DuffelProvider(access_token=settings.DUFFEL_ACCESS_TOKEN)
    return MockProvider()
