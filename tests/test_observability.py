import json

from flightfinder.config import Settings
from flightfinder.obs.context import clear_context, request_id_var, room_id_var
from flightfinder.obs.logger import log_event
from flightfinder.obs.metrics import get_metrics_snapshot, reset_metrics, timed
from flightfinder.pipeline import PipelineConfig
from flightfinder.types import PriceOrder


def _last_line(capsys):
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_log_event_carries_context(capsys):
    request_id_var.set("req-1")
    room_id_var.set("room-7")
    try:
        log_event("step", level="WARNING", stage="unit-test")
    finally:
        clear_context()
    payload = _last_line(capsys)
    assert payload["event"] == "step"
    assert payload["level"] == "WARNING"
    assert payload["request_id"] == "req-1"
    assert payload["room_id"] == "room-7"
    assert payload["stage"] == "unit-test"


def test_log_event_clips_free_text(capsys):
    log_event("model_flight_plan", raw_text="x" * 500, origin="JFK")
    payload = _last_line(capsys)
    assert payload["raw_text"] == "x" * 120 + "..."
    assert payload["origin"] == "JFK"


def test_timed_records_even_on_error():
    reset_metrics()
    try:
        with timed("provider"):
            raise ValueError("nope")
    except ValueError:
        pass
    [hist] = get_metrics_snapshot()["histograms"]
    assert hist["name"] == "stage_latency_ms"
    assert hist["labels"] == {"stage": "provider"}
    assert sum(hist["counts"]) == 1


def test_resolved_provider():
    assert Settings(_env_file=None).resolved_provider() == "mock"
    assert Settings(_env_file=None, FLIGHT_PROVIDER="duffel").resolved_provider() == "duffel"
    both = Settings(_env_file=None, AMADEUS_CLIENT_ID="a", AMADEUS_CLIENT_SECRET="b", DUFFEL_ACCESS_TOKEN="c")
    assert both.resolved_provider() == "amadeus"


def test_pipeline_config_from_settings():
    s = Settings(_env_file=None, AGENT_NAME="Basefly", OFFER_SORT_ORDER="desc",
                 SUMMARY_MAX_TOKENS=300, PIPELINE_TIMEOUT_SECONDS=30)
    cfg = PipelineConfig.from_settings(s)
    assert cfg.agent_name == "Basefly"
    assert cfg.sort_order == PriceOrder.DESCENDING
    assert cfg.summary_max_tokens == 300
    assert cfg.timeout_seconds == 30.0
    assert cfg.max_results == 1
