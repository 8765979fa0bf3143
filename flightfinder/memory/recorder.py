"""Conversation memory sinks and the best-effort recording wrapper.

The pipeline stores two records per successful run: the normalized query with
its offers ('flight_data') and the generated summary ('messages'). Storage is
a side effect; a failing sink must never change what the caller gets back.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol
import asyncio
import json
import threading

import redis

from flightfinder.obs.logger import log_event
from flightfinder.obs.metrics import inc_counter
from flightfinder.types import FlightQuery, Offer


class MemorySink(Protocol):
    def record(self, kind: str, payload: Dict[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class RecordOutcome:
    ok: bool
    kind: str
    error: Optional[str] = None


async def record_best_effort(sink: Optional[MemorySink], kind: str, payload: Dict[str, Any]) -> RecordOutcome:
    """Store payload; any failure is logged and returned, never raised.

    The blocking sink call runs in a worker thread.
    """
    if sink is None:
        return RecordOutcome(ok=False, kind=kind, error="no memory sink configured")
    try:
        await asyncio.to_thread(sink.record, kind, payload)
    except Exception as e:
        log_event("memory_record_failed", level="WARNING", kind=kind, error=f"{type(e).__name__}: {e}")
        inc_counter("memory_record_failures_total", {"kind": kind})
        return RecordOutcome(ok=False, kind=kind, error=str(e))
    log_event("memory_recorded", kind=kind)
    return RecordOutcome(ok=True, kind=kind)


class InMemorySink:
    """Process-local record lists per kind; used in dev and tests."""

    def __init__(self, max_records: int = 500):
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.max_records = max_records
        self._lock = threading.Lock()
        self._data: Dict[str, List[Dict[str, Any]]] = {}

    def record(self, kind: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            records = self._data.setdefault(kind, [])
            records.append(payload)
            del records[:-self.max_records]

    def records(self, kind: str) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._data.get(kind, []))


class RedisMemorySink:
    """Append JSON records to a per-room Redis list with a TTL."""

    def __init__(self, redis_url: str, ttl_seconds: int = 86400, max_records: int = 100,
                 client: Optional[redis.Redis] = None):
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_records = max_records
        self.client = client or redis.from_url(redis_url, decode_responses=True, socket_timeout=2.0,
                                                socket_connect_timeout=2.0)
        self.prefix = "memory:"

    def _get_key(self, kind: str, room_id: Optional[str]) -> str:
        return f"{self.prefix}{kind}:{room_id or 'global'}"

    def record(self, kind: str, payload: Dict[str, Any]) -> None:
        key = self._get_key(kind, payload.get("roomId"))
        pipe = self.client.pipeline()
        pipe.rpush(key, json.dumps(payload, default=str))
        pipe.ltrim(key, -self.max_records, -1)
        pipe.expire(key, self.ttl_seconds)
        pipe.execute()


def _ids(context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    ctx = context or {}
    return {
        "roomId": ctx.get("room_id"),
        "entityId": ctx.get("entity_id"),
        "agentId": ctx.get("agent_id"),
    }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def flight_data_record(query: FlightQuery, offers: List[Offer],
                       context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    dep_window = query.departure_window
    ret_window = query.return_window
    return {
        "type": "flight_data",
        "content": {
            "text": "",
            "ticket_type": "round_trip",
            "origin": query.origin,
            "destination": query.destination,
            "depart_date": query.departure_date.isoformat(),
            "return_date": query.return_date.isoformat(),
            "passengers": query.passengers,
            "cabin_class": query.cabin_class.value,
            "departure_flight_departure_time_after": dep_window.after if dep_window else None,
            "departure_flight_departure_time_before": dep_window.before if dep_window else None,
            "return_flight_departure_time_after": ret_window.after if ret_window else None,
            "return_flight_departure_time_before": ret_window.before if ret_window else None,
            "flight_options": [o.model_dump(mode="json") for o in offers],
        },
        "timestamp": _now(),
        **_ids(context),
    }


def summary_message_record(summary: str, context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "content": {"text": summary, "source": "agent_action"},
        "timestamp": _now(),
        **_ids(context),
    }
