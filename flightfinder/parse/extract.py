"""Pull a flight-plan JSON object out of free-form model output.

Models wrap JSON in prose or Markdown fences despite being told not to, so
extraction takes the first '{' to the last '}' and parses that. Failure is
returned, not raised: the caller decides whether to fall back to a default.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import re

from flightfinder.errors import ExtractionError

_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class Extraction:
    """Exactly one of plan / error is set."""

    plan: Optional[Dict[str, Any]] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.plan is not None


def extract_flight_plan(raw: Optional[str]) -> Extraction:
    text = (raw or "").strip()

    match = _OBJECT.search(text)
    if not match:
        return Extraction(error=ExtractionError("No JSON object in model output", raw_text=text[:200]))

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return Extraction(error=ExtractionError("Malformed JSON in model output", cause=e, raw_text=text[:200]))

    if not isinstance(data, dict):
        return Extraction(error=ExtractionError("Model output is not a JSON object", raw_text=text[:200]))
    return Extraction(plan=data)


def default_flight_plan(origin: str = "JFK", destination: str = "LAX") -> Dict[str, Any]:
    """Generic plan used when the model output is unusable."""
    return {
        "originLocationCode": origin,
        "destinationLocationCode": destination,
        "adults": 1,
        "travelClass": "ECONOMY",
    }
