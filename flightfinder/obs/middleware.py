"""ASGI middleware for lightweight observability."""

from typing import Callable, Any
import time
import uuid

from fastapi import FastAPI

from flightfinder.obs.context import request_id_var
from flightfinder.obs.logger import log_event
from flightfinder.obs.metrics import record_timing, inc_counter


class ObservabilityMiddleware:
    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable[[dict], Any]):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        # an upstream x-request-id wins
        headers = dict(scope.get("headers") or [])
        upstream = headers.get(b"x-request-id")
        req_id = upstream.decode("latin-1") if upstream else str(uuid.uuid4())
        token = request_id_var.set(req_id)
        method = scope.get("method", "")
        route = scope.get("path", "")
        start = time.monotonic()
        status_code = 500

        async def send_wrapper(message: dict):
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 200))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000.0
            record_timing("request_latency_ms", elapsed_ms, {"route": route})
            inc_counter("requests_total", {"route": route, "status": str(status_code)})
            log_event(
                "request",
                method=method,
                route=route,
                status=status_code,
                ms_total=round(elapsed_ms, 2),
            )
            request_id_var.reset(token)
