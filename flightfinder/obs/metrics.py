"""Minimal in-process counters and histograms.

No external dependencies. Good enough for a single-process service; the
snapshot is exposed on /metrics.
"""

from contextlib import contextmanager
from typing import Dict, Any, Iterator, Optional, Tuple, List
import threading
import time


_LOCK = threading.Lock()

# (name, sorted label pairs) -> value
_COUNTERS: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], int] = {}

# name -> {"bins": [...], "series": {labels -> {"counts": [...], "sum_ms": float}}}
_DEFAULT_BINS: List[int] = [50, 100, 250, 500, 1000, 3000, 5000, 10000, 30000]
_HISTOGRAMS: Dict[str, Dict[str, Any]] = {}


def _labels_key(labels: Optional[Dict[str, str]]) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def inc_counter(metric: str, labels: Optional[Dict[str, str]] = None) -> None:
    key = (metric, _labels_key(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0) + 1


def get_counter(metric: str, labels: Optional[Dict[str, str]] = None) -> int:
    with _LOCK:
        return _COUNTERS.get((metric, _labels_key(labels)), 0)


def record_timing(metric: str, value_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
    if value_ms is None:
        return
    lk = _labels_key(labels)
    with _LOCK:
        hist = _HISTOGRAMS.setdefault(metric, {"bins": list(_DEFAULT_BINS), "series": {}})
        bins: List[int] = hist["bins"]
        entry = hist["series"].get(lk)
        if entry is None:
            entry = {"counts": [0] * (len(bins) + 1), "sum_ms": 0.0}
            hist["series"][lk] = entry
        idx = len(bins)
        for i, b in enumerate(bins):
            if value_ms <= b:
                idx = i
                break
        entry["counts"][idx] += 1
        entry["sum_ms"] += float(value_ms)


@contextmanager
def timed(stage: str, metric: str = "stage_latency_ms") -> Iterator[None]:
    """Record wall time of the wrapped block under {stage=...}, even on error."""
    start = time.monotonic()
    try:
        yield
    finally:
        record_timing(metric, (time.monotonic() - start) * 1000.0, {"stage": stage})


def get_metrics_snapshot() -> Dict[str, Any]:
    with _LOCK:
        counters = [
            {"name": name, "labels": dict(labels_tuple), "value": value}
            for (name, labels_tuple), value in _COUNTERS.items()
        ]
        histograms = [
            {
                "name": name,
                "labels": dict(labels_tuple),
                "bins_ms": list(h["bins"]),
                "counts": list(entry["counts"]),
                "sum_ms": entry["sum_ms"],
            }
            for name, h in _HISTOGRAMS.items()
            for labels_tuple, entry in h["series"].items()
        ]
    return {"counters": counters, "histograms": histograms}


def reset_metrics() -> None:
    with _LOCK:
        _COUNTERS.clear()
        _HISTOGRAMS.clear()
