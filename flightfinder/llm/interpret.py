from datetime import date
from typing import Any, Dict, Optional

from langchain_core.prompts import PromptTemplate

from flightfinder.llm.client import ModelInvoker
from flightfinder.obs.logger import log_event

FLIGHT_PLAN_TEMPLATE = """Extract flight information from the user's message and return ONLY a valid JSON object with the following structure:

{{
  "originLocationCode": "3-letter IATA airport code for departure",
  "destinationLocationCode": "3-letter IATA airport code for arrival",
  "departureDate": "YYYY-MM-DD format (optional)",
  "returnDate": "YYYY-MM-DD format (optional, for round trips)",
  "adults": 1,
  "travelClass": "ECONOMY",
  "departure_flight_departure_time_after": "HH:MM (optional)",
  "departure_flight_departure_time_before": "HH:MM (optional)",
  "return_flight_departure_time_after": "HH:MM (optional)",
  "return_flight_departure_time_before": "HH:MM (optional)"
}}

IMPORTANT:
- Return ONLY the JSON object, no other text
- Use common airport codes (JFK for New York, LHR for London, LAX for Los Angeles, etc.)
- Always include originLocationCode and destinationLocationCode
- adults is an integer from 1 to 9, default to 1 if not specified
- travelClass is one of "ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST" (default "ECONOMY")
- Omit any optional key you cannot infer
- Today's date for reference: {today}
{conversation}
User message: {user_message}

JSON response:"""

_prompt = PromptTemplate.from_template(FLIGHT_PLAN_TEMPLATE)


def _conversation_block(context: Optional[Dict[str, Any]]) -> str:
    """Recent conversation lines, oldest first, if the host supplied any."""
    messages = (context or {}).get("recent_messages") or []
    lines = []
    for m in messages[-10:]:
        if isinstance(m, dict):
            role = m.get("role") or m.get("user") or "user"
            text = m.get("text") or m.get("content") or ""
        else:
            role, text = "user", str(m)
        if text:
            lines.append(f"{role}: {text}")
    if not lines:
        return ""
    return "\nRecent conversation:\n" + "\n".join(lines) + "\n"


def build_flight_plan_prompt(text: str, context: Optional[Dict[str, Any]], today: date) -> str:
    return _prompt.format(
        today=today.isoformat(),
        conversation=_conversation_block(context),
        user_message=text,
    )


async def interpret_request(model: ModelInvoker, text: str, context: Optional[Dict[str, Any]],
                            today: date, max_tokens: int = 500, temperature: float = 0.7) -> str:
    """Ask the model for a flight plan; the raw reply is returned untouched."""
    prompt = build_flight_plan_prompt(text, context, today)
    raw = await model.invoke(prompt, max_tokens=max_tokens, temperature=temperature)
    log_event("model_flight_plan", raw_text=raw)
    return raw
