import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from flightfinder.memory.recorder import (
    InMemorySink,
    RedisMemorySink,
    flight_data_record,
    record_best_effort,
    summary_message_record,
)
from flightfinder.obs.metrics import get_counter, reset_metrics
from flightfinder.types import FlightQuery, TimeWindow


def _query():
    return FlightQuery(
        origin="JFK",
        destination="LAX",
        departure_date=date(2026, 3, 17),
        return_date=date(2026, 3, 24),
        return_window=TimeWindow(after="17:00"),
    )


def test_in_memory_sink_keeps_latest_records():
    sink = InMemorySink(max_records=2)
    for i in range(3):
        sink.record("messages", {"n": i})
    assert sink.records("messages") == [{"n": 1}, {"n": 2}]
    assert sink.records("flight_data") == []


def test_redis_sink_appends_trims_and_expires():
    client = MagicMock()
    pipe = client.pipeline.return_value
    sink = RedisMemorySink("redis://unused", ttl_seconds=60, max_records=5, client=client)

    sink.record("messages", {"roomId": "room-1", "content": {"text": "hi"}})

    pipe.rpush.assert_called_once()
    key, value = pipe.rpush.call_args.args
    assert key == "memory:messages:room-1"
    assert json.loads(value)["content"]["text"] == "hi"
    pipe.ltrim.assert_called_once_with(key, -5, -1)
    pipe.expire.assert_called_once_with(key, 60)
    pipe.execute.assert_called_once()


def test_redis_sink_without_room_uses_global_key():
    client = MagicMock()
    RedisMemorySink("redis://unused", client=client).record("flight_data", {"roomId": None})
    key = client.pipeline.return_value.rpush.call_args.args[0]
    assert key == "memory:flight_data:global"


async def test_best_effort_swallows_and_counts_failures(capsys):
    reset_metrics()
    sink = MagicMock()
    sink.record.side_effect = TimeoutError("slow")

    outcome = await record_best_effort(sink, "messages", {})

    assert not outcome.ok
    assert outcome.error == "slow"
    assert get_counter("memory_record_failures_total", {"kind": "messages"}) == 1
    assert "memory_record_failed" in capsys.readouterr().out


async def test_best_effort_without_sink():
    assert not (await record_best_effort(None, "messages", {})).ok


async def test_best_effort_writes_to_sink():
    sink = InMemorySink()
    outcome = await record_best_effort(sink, "messages", {"n": 1})
    assert outcome.ok
    assert sink.records("messages") == [{"n": 1}]


@pytest.mark.parametrize("max_records", [0, -1])
def test_sinks_need_a_positive_record_limit(max_records):
    with pytest.raises(ValueError):
        InMemorySink(max_records=max_records)
    with pytest.raises(ValueError):
        RedisMemorySink("redis://unused", max_records=max_records, client=MagicMock())


def test_flight_data_record_shape(offer_factory):
    record = flight_data_record(_query(), [offer_factory("o-1", 199)], {"room_id": "r", "entity_id": "e"})
    content = record["content"]
    assert record["type"] == "flight_data"
    assert (record["roomId"], record["entityId"], record["agentId"]) == ("r", "e", None)
    assert content["depart_date"] == "2026-03-17"
    assert content["cabin_class"] == "economy"
    assert content["departure_flight_departure_time_after"] is None
    assert content["return_flight_departure_time_after"] == "17:00"
    assert content["flight_options"][0]["price"]["amount"] == "199"
    assert "raw" not in content["flight_options"][0]


def test_summary_message_record():
    record = summary_message_record("Cheapest is AA", None)
    assert record["content"] == {"text": "Cheapest is AA", "source": "agent_action"}
    assert record["roomId"] is None
