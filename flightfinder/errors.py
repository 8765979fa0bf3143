"""Typed errors for the flight finder pipeline.

Every collaborator failure is raised as a FlightFinderError subclass so the
pipeline can map it to a fixed user-facing message while keeping the
underlying cause for logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FlightFinderError(Exception):
    """Base error for the flight finder domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ExtractionError(FlightFinderError):
    """Model output did not contain a usable JSON object.

    Attributes:
        raw_text: The model output that failed to parse (truncated)
    """

    raw_text: str = ""


@dataclass
class ModelInvocationError(FlightFinderError):
    """The language model call failed."""

    model: str = ""


@dataclass
class ProviderError(FlightFinderError):
    """The flight-search provider call failed.

    Attributes:
        provider: Provider name, e.g. 'amadeus'
        status_code: HTTP status if the provider answered
    """

    provider: str = ""
    status_code: Optional[int] = None


@dataclass
class ConfigurationError(FlightFinderError):
    """Invalid or missing configuration."""

    setting_name: str = ""
