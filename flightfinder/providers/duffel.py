import httpx
from typing import Any, Dict, List, Optional

from flightfinder.errors import ProviderError
from flightfinder.obs.logger import log_event
from flightfinder.providers.transform import from_duffel
from flightfinder.types import FlightQuery, Offer, TimeWindow

DUFFEL_BASE = "https://api.duffel.com/air"


class DuffelProvider:
    name = "duffel"

    def __init__(self, access_token: str, max_connections: int = 0,
                 http: Optional[httpx.AsyncClient] = None):
        self.access_token = access_token
        self.max_connections = max_connections
        self._http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=3.0, read=60.0, write=12.0, pool=12.0),
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Duffel-Version": "v2",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _slice(self, origin: str, destination: str, day: str,
               window: Optional[TimeWindow]) -> Dict[str, Any]:
        slc: Dict[str, Any] = {"origin": origin, "destination": destination, "departure_date": day}
        if window:
            slc["departure_time"] = {k: v for k, v in (("from", window.after), ("to", window.before)) if v}
        return slc

    def build_request_body(self, query: FlightQuery) -> Dict[str, Any]:
        return {
            "data": {
                "slices": [
                    self._slice(query.origin, query.destination,
                                query.departure_date.isoformat(), query.departure_window),
                    self._slice(query.destination, query.origin,
                                query.return_date.isoformat(), query.return_window),
                ],
                "passengers": [{"type": "adult"} for _ in range(query.passengers)],
                "cabin_class": query.cabin_class.value,
                "max_connections": self.max_connections,
            }
        }

    async def search(self, query: FlightQuery) -> List[Offer]:
        log_event("provider_search", provider=self.name, origin=query.origin,
                  destination=query.destination, departure_date=query.departure_date,
                  return_date=query.return_date, adults=query.passengers)
        try:
            r = await self._http.post(
                f"{DUFFEL_BASE}/offer_requests",
                params={"return_offers": "true"},
                json=self.build_request_body(query),
                headers=self._headers(),
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError("Duffel offer request failed", cause=e,
                                provider=self.name, status_code=e.response.status_code)
        except httpx.HTTPError as e:
            raise ProviderError("Duffel offer request unreachable", cause=e, provider=self.name)

        offers = from_duffel(r.json())
        log_event("provider_response", provider=self.name, offers=len(offers))
        return offers

    async def aclose(self) -> None:
        await self._http.aclose()
