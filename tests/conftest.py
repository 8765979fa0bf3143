import os
import sys
import asyncio
import inspect
from datetime import date
from decimal import Decimal

import pytest

# Ensure project root is on sys.path so `import flightfinder` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from flightfinder.iata.lookup import AirportDb
from flightfinder.types import Itinerary, Offer, Price, Segment

AIRPORTS_CSV = os.path.join(ROOT, "data", "airports.csv")
TODAY = date(2026, 3, 10)


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None


class ScriptedModel:
    """ModelInvoker double: returns queued replies and remembers every call."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def invoke(self, prompt, max_tokens, temperature):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_offer(offer_id, amount, currency="USD", carrier="AA", round_trip=True):
    outbound = Segment(carrier_code=carrier, departure_at="2026-03-17T10:30:00", origin="JFK", destination="LAX")
    legs = [Itinerary(segments=(outbound,))]
    if round_trip:
        inbound = Segment(carrier_code=carrier, departure_at="2026-03-24T16:45:00", origin="LAX", destination="JFK")
        legs.append(Itinerary(segments=(inbound,)))
    return Offer(id=offer_id, price=Price(amount=Decimal(str(amount)), currency=currency), itineraries=tuple(legs))


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def airports():
    return AirportDb(csv_path=AIRPORTS_CSV)


@pytest.fixture
def offer_factory():
    return make_offer


@pytest.fixture
def scripted_model():
    return ScriptedModel
