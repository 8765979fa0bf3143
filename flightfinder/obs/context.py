"""Request context helpers using ContextVars.

Each pipeline run (and each HTTP request) sets its own request_id; the host
conversation identifiers travel alongside so every log line can be tied back
to the room it came from.
"""

from contextvars import ContextVar
from typing import Optional


# Public ContextVars (names are stable API)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
room_id_var: ContextVar[Optional[str]] = ContextVar("room_id", default=None)
entity_id_var: ContextVar[Optional[str]] = ContextVar("entity_id", default=None)


def clear_context() -> None:
    """Reset context variables to defaults."""
    request_id_var.set(None)
    room_id_var.set(None)
    entity_id_var.set(None)
