"""Structured JSON logging to stdout.

Low overhead, minimal dependencies, safe for production stdout collectors.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from flightfinder.obs.context import request_id_var, room_id_var, entity_id_var

_MAX_TEXT = 120


def _truncate_text(value: Any) -> Any:
    s = str(value) if value is not None else ""
    if len(s) <= _MAX_TEXT:
        return s
    return s[:_MAX_TEXT] + "..."


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }
    # Attach context vars if not provided explicitly
    payload.setdefault("room_id", room_id_var.get())
    payload.setdefault("entity_id", entity_id_var.get())

    # Merge remaining fields; free text from users and models is clipped
    for k, v in fields.items():
        if k in ("user_text", "raw_text", "summary_text"):
            payload[k] = _truncate_text(v)
        else:
            payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str))
    except Exception:
        # As a last resort, avoid crashing the pipeline due to logging
        pass
