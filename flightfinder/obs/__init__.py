"""Observability package.

Structured JSON logging, in-process metrics, request-scoped context and the
ASGI middleware that ties them to HTTP requests.
"""

__all__ = [
    "middleware",
    "metrics",
    "logger",
    "context",
]
