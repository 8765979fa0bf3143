import asyncio
import httpx
import time
from typing import Any, Dict, List, Optional

from flightfinder.errors import ProviderError
from flightfinder.obs.logger import log_event
from flightfinder.providers.transform import from_amadeus
from flightfinder.types import FlightQuery, Offer, TimeWindow

SANDBOX = "https://test.api.amadeus.com"
PRODUCTION = "https://api.amadeus.com"


class AmadeusProvider:
    name = "amadeus"

    def __init__(self, client_id: str, client_secret: str, env: str = "sandbox",
                 max_offers: int = 10, http: Optional[httpx.AsyncClient] = None,
                 retry_delay: float = 1.5):
        self.base = PRODUCTION if env == "production" else SANDBOX
        self.client_id = client_id
        self.client_secret = client_secret
        self.max_offers = max_offers
        self.retry_delay = retry_delay
        self._token = None
        self._exp = 0
        # Persistent HTTP client with HTTP/2 and sensible timeouts
        self._http = http or httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(connect=3.0, read=45.0, write=12.0, pool=12.0),
        )

    async def _get_token(self) -> str:
        if self._token and time.time() < self._exp - 60:
            return self._token
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        r = await self._http.post(
            f"{self.base}/v1/security/oauth2/token",
            data=data,
            headers={"Accept": "application/json"},
        )
        r.raise_for_status()
        j = r.json()
        self._token = j["access_token"]
        self._exp = time.time() + j.get("expires_in", 1799)
        return self._token

    def _build_travelers(self, adults: int) -> List[Dict[str, Any]]:
        """ADULT travelers with sequential string ids starting at '1'."""
        count = max(1, int(adults) if adults is not None else 1)
        return [{"id": str(i + 1), "travelerType": "ADULT"} for i in range(count)]

    def _date_time_range(self, day: str, window: Optional[TimeWindow]) -> Dict[str, Any]:
        rng: Dict[str, Any] = {"date": day}
        # Amadeus takes a single earliest time, not a range
        if window and window.after:
            rng["time"] = f"{window.after}:00" if len(window.after) == 5 else window.after
        return rng

    def build_request_body(self, query: FlightQuery) -> Dict[str, Any]:
        """Flight Offers Search v2 body: outbound leg plus the reverse leg for the return."""
        legs = [
            {
                "id": "1",
                "originLocationCode": query.origin,
                "destinationLocationCode": query.destination,
                "departureDateTimeRange": self._date_time_range(
                    query.departure_date.isoformat(), query.departure_window),
            },
            {
                "id": "2",
                "originLocationCode": query.destination,
                "destinationLocationCode": query.origin,
                "departureDateTimeRange": self._date_time_range(
                    query.return_date.isoformat(), query.return_window),
            },
        ]
        return {
            "currencyCode": "USD",
            "originDestinations": legs,
            "travelers": self._build_travelers(query.passengers),
            "sources": ["GDS"],
            "searchCriteria": {
                "maxFlightOffers": self.max_offers,
                "flightFilters": {
                    "cabinRestrictions": [{
                        "cabin": query.cabin_class.provider_code,
                        "coverage": "MOST_SEGMENTS",
                        "originDestinationIds": ["1", "2"],
                    }],
                },
            },
        }

    async def search(self, query: FlightQuery) -> List[Offer]:
        log_event("provider_search", provider=self.name, origin=query.origin,
                  destination=query.destination, departure_date=query.departure_date,
                  return_date=query.return_date, adults=query.passengers)
        try:
            token = await self._get_token()
        except httpx.HTTPError as e:
            raise ProviderError("Amadeus authentication failed", cause=e, provider=self.name)

        body = self.build_request_body(query)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        # Single retry with short backoff for 5xx and connection trouble
        attempt = 0
        while True:
            try:
                r = await self._http.post(f"{self.base}/v2/shopping/flight-offers", json=body, headers=headers)
                r.raise_for_status()
                offers = from_amadeus(r.json())
                log_event("provider_response", provider=self.name, offers=len(offers))
                return offers
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                log_event("provider_http_error", level="ERROR", provider=self.name,
                          status=status, attempt=attempt)
                if 500 <= status < 600 and attempt == 0:
                    attempt += 1
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise ProviderError("Amadeus flight search failed", cause=e,
                                    provider=self.name, status_code=status)
            except (httpx.TimeoutException, httpx.TransportError) as e:
                log_event("provider_connection_error", level="ERROR", provider=self.name,
                          error=type(e).__name__, attempt=attempt)
                if attempt == 0:
                    attempt += 1
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise ProviderError("Amadeus flight search unreachable", cause=e, provider=self.name)

    async def aclose(self) -> None:
        await self._http.aclose()
