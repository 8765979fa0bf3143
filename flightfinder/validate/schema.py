"""
Flight plan schema validation

Structural gate between model output and the provider call. The model may
answer with Amadeus-style keys (originLocationCode, adults, travelClass) or
snake_case ones (origin, passengers, cabin_class); both map onto one schema.
Anything that cannot be searched (no origin/destination) is rejected here.
"""

from datetime import date
from typing import Any, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, field_validator

from flightfinder.types import CabinClass, FlightQuery, TimeWindow
from flightfinder.utils.dates import normalize_travel_dates


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _window(after: Optional[str], before: Optional[str]) -> Optional[TimeWindow]:
    window = TimeWindow(after=after or None, before=before or None)
    return None if window.is_empty() else window


class FlightPlanSchema(BaseModel):
    """Declarative contract for a candidate flight plan"""
    model_config = ConfigDict(extra="ignore", frozen=True)

    origin: StrictStr = Field(..., min_length=3, validation_alias=_alias("originLocationCode", "origin"))
    destination: StrictStr = Field(..., min_length=3, validation_alias=_alias("destinationLocationCode", "destination"))
    departure_date: Optional[StrictStr] = Field(None, validation_alias=_alias("departureDate", "departure_date"))
    return_date: Optional[StrictStr] = Field(None, validation_alias=_alias("returnDate", "return_date"))
    passengers: Optional[StrictInt] = Field(None, ge=1, le=9, validation_alias=_alias("adults", "passengers"))
    cabin_class: Optional[CabinClass] = Field(None, validation_alias=_alias("travelClass", "cabin_class"))
    departure_time_after: Optional[StrictStr] = Field(
        None, validation_alias=_alias("departure_flight_departure_time_after", "departureTimeAfter"))
    departure_time_before: Optional[StrictStr] = Field(
        None, validation_alias=_alias("departure_flight_departure_time_before", "departureTimeBefore"))
    return_time_after: Optional[StrictStr] = Field(
        None, validation_alias=_alias("return_flight_departure_time_after", "returnTimeAfter"))
    return_time_before: Optional[StrictStr] = Field(
        None, validation_alias=_alias("return_flight_departure_time_before", "returnTimeBefore"))

    @field_validator("origin", "destination")
    @classmethod
    def _code(cls, v: str) -> str:
        code = v.strip().upper()
        if len(code) < 3:
            raise ValueError("location code must be at least 3 characters")
        return code

    @field_validator("cabin_class", mode="before")
    @classmethod
    def _cabin_case(cls, v: Any) -> Any:
        # 'ECONOMY' / 'Business' / 'premium economy' are all fine
        if isinstance(v, str):
            return v.strip().lower().replace(" ", "_")
        return v

    def to_query(self, today: date) -> FlightQuery:
        """Normalize dates and fill defaults; the result is immutable."""
        departure, return_ = normalize_travel_dates(self.departure_date, self.return_date, today)
        return FlightQuery(
            origin=self.origin,
            destination=self.destination,
            departure_date=departure,
            return_date=return_,
            passengers=self.passengers or 1,
            cabin_class=self.cabin_class or CabinClass.ECONOMY,
            departure_window=_window(self.departure_time_after, self.departure_time_before),
            return_window=_window(self.return_time_after, self.return_time_before),
        )


class ValidationResult(BaseModel):
    """Result of flight plan validation"""
    is_valid: bool
    errors: List[str] = []
    plan: Optional[FlightPlanSchema] = None


def _describe(err: ValidationError) -> List[str]:
    out = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()))
        out.append(f"{loc}: {e.get('msg')}" if loc else str(e.get("msg")))
    return out


def validate_flight_plan(obj: Any) -> ValidationResult:
    """Check a parsed object against the flight plan contract."""
    if not isinstance(obj, dict):
        return ValidationResult(is_valid=False, errors=["flight plan must be a JSON object"])
    try:
        plan = FlightPlanSchema.model_validate(obj)
    except ValidationError as e:
        return ValidationResult(is_valid=False, errors=_describe(e))
    return ValidationResult(is_valid=True, plan=plan)


def is_flight_plan(obj: Any) -> bool:
    return validate_flight_plan(obj).is_valid
