from datetime import date
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Tuple, Dict, Any

class CabinClass(str, Enum):
    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"

    @property
    def provider_code(self) -> str:
        # Amadeus spelling, e.g. 'PREMIUM_ECONOMY'
        return self.value.upper()


class PriceOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    after: Optional[str] = Field(None, description="HH:MM")
    before: Optional[str] = Field(None, description="HH:MM")

    def is_empty(self) -> bool:
        return not self.after and not self.before


class FlightQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str = Field(..., description="3-letter IATA code")
    destination: str
    departure_date: date
    return_date: date
    passengers: int = Field(1, ge=1, le=9)
    cabin_class: CabinClass = CabinClass.ECONOMY
    departure_window: Optional[TimeWindow] = None
    return_window: Optional[TimeWindow] = None


class Price(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: str = "USD"


class Segment(BaseModel):
    model_config = ConfigDict(frozen=True)

    carrier_code: str
    departure_at: str            # provider timestamp, e.g. '2025-11-19T10:30:00'
    carrier_name: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None

    @property
    def carrier(self) -> str:
        return self.carrier_name or self.carrier_code


class Itinerary(BaseModel):
    model_config = ConfigDict(frozen=True)

    segments: Tuple[Segment, ...] = Field(..., min_length=1)


class Offer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    price: Price
    itineraries: Tuple[Itinerary, ...] = Field(..., min_length=1, max_length=2)
    raw: Optional[Dict[str, Any]] = Field(None, exclude=True, repr=False)  # untouched provider record


class RankedSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    offers: Tuple[Offer, ...] = ()
    order: PriceOrder = PriceOrder.ASCENDING

    @property
    def best(self) -> Optional[Offer]:
        return self.offers[0] if self.offers else None


class AirportInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    city: str = ""
    country: str = ""


class PipelineData(BaseModel):
    query: Optional[FlightQuery] = None
    offers: List[Offer] = []
    origin_airport: Optional[AirportInfo] = None
    destination_airport: Optional[AirportInfo] = None


class PipelineResult(BaseModel):
    success: bool
    summary_text: str
    error_code: Optional[str] = None
    error: Optional[str] = None   # internal detail for logs, never shown to the user
    data: PipelineData = PipelineData()
