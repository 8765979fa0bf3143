"""
Flight search pipeline

Free text -> model flight plan -> validated, date-normalized query -> provider
offers -> cheapest offer -> model summary. One coroutine per request; nothing
mutable is shared between runs.
"""

import asyncio
import uuid
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from flightfinder.config import Settings
from flightfinder.formatters.digest import format_offer_digest
from flightfinder.iata.lookup import AirportDb
from flightfinder.llm.client import ModelInvoker
from flightfinder.llm.interpret import interpret_request
from flightfinder.llm.summarize import summarize_offers
from flightfinder.memory.recorder import (
    MemorySink,
    flight_data_record,
    record_best_effort,
    summary_message_record,
)
from flightfinder.obs.context import entity_id_var, request_id_var, room_id_var
from flightfinder.obs.logger import log_event
from flightfinder.obs.metrics import inc_counter, timed
from flightfinder.parse.extract import default_flight_plan, extract_flight_plan
from flightfinder.providers.base import OfferProvider
from flightfinder.rank.selector import rank_offers
from flightfinder.types import FlightQuery, Offer, PipelineData, PipelineResult, PriceOrder
from flightfinder.utils.dates import today_in
from flightfinder.validate.schema import FlightPlanSchema, validate_flight_plan

INVALID_PLAN_TEXT = "Invalid flight plan provided."
NO_OFFERS_TEXT = "I couldn't find any flights for that trip. Try different dates or airports."
FAILURE_TEXT = "Failed to complete your flight search. Please try again later."

INVALID_FLIGHT_PLAN = "INVALID_FLIGHT_PLAN"
NO_OFFERS = "NO_OFFERS"
RESOURCE_CREATION_FAILED = "RESOURCE_CREATION_FAILED"


class PipelineConfig(BaseModel):
    """Explicit pipeline policy; nothing is read from the environment at call time."""
    model_config = ConfigDict(frozen=True)

    agent_name: str = "Easeflyt"
    timezone: str = "UTC"
    fallback_origin: str = "JFK"
    fallback_destination: str = "LAX"
    sort_order: PriceOrder = PriceOrder.ASCENDING
    max_results: int = 1
    interpret_max_tokens: int = 500
    interpret_temperature: float = 0.7
    summary_max_tokens: int = 500
    summary_temperature: float = 0.7
    timeout_seconds: float = 90.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            agent_name=settings.AGENT_NAME,
            timezone=settings.TZ,
            fallback_origin=settings.FALLBACK_ORIGIN,
            fallback_destination=settings.FALLBACK_DESTINATION,
            sort_order=PriceOrder(settings.OFFER_SORT_ORDER),
            interpret_max_tokens=settings.INTERPRET_MAX_TOKENS,
            interpret_temperature=settings.INTERPRET_TEMPERATURE,
            summary_max_tokens=settings.SUMMARY_MAX_TOKENS,
            summary_temperature=settings.SUMMARY_TEMPERATURE,
            timeout_seconds=settings.PIPELINE_TIMEOUT_SECONDS,
        )


class FlightSearchPipeline:
    def __init__(self, model: ModelInvoker, provider: OfferProvider,
                 airports: Optional[AirportDb] = None, memory: Optional[MemorySink] = None,
                 config: Optional[PipelineConfig] = None,
                 clock: Optional[Callable[[], date]] = None):
        self.model = model
        self.provider = provider
        self.airports = airports
        self.memory = memory
        self.config = config or PipelineConfig()
        self._clock = clock or (lambda: today_in(self.config.timezone))

    async def handle(self, user_text: str, context: Optional[Dict[str, Any]] = None) -> PipelineResult:
        context = context or {}
        tokens = [
            (request_id_var, request_id_var.set(request_id_var.get() or str(uuid.uuid4()))),
            (room_id_var, room_id_var.set(context.get("room_id"))),
            (entity_id_var, entity_id_var.set(context.get("entity_id"))),
        ]
        log_event("pipeline_start", user_text=user_text)
        try:
            result = await self._run(user_text, context)
        except Exception as e:
            log_event("pipeline_failed", level="ERROR", error_type=type(e).__name__, error=str(e))
            result = self._failure(str(e))
        finally:
            for var, token in reversed(tokens):
                var.reset(token)
        inc_counter("pipeline_runs_total", {"outcome": result.error_code or "SUCCESS"})
        return result

    async def handle_with_timeout(self, user_text: str,
                                  context: Optional[Dict[str, Any]] = None) -> PipelineResult:
        """handle() bounded by config.timeout_seconds; a timeout is a failed run."""
        try:
            return await asyncio.wait_for(self.handle(user_text, context), self.config.timeout_seconds)
        except asyncio.TimeoutError:
            log_event("pipeline_timeout", level="ERROR", timeout_s=self.config.timeout_seconds)
            inc_counter("pipeline_runs_total", {"outcome": "TIMEOUT"})
            return self._failure(f"pipeline timed out after {self.config.timeout_seconds}s")

    async def _run(self, user_text: str, context: Dict[str, Any]) -> PipelineResult:
        cfg = self.config
        today = self._clock()

        with timed("interpret"):
            raw = await interpret_request(
                self.model, user_text, context, today,
                max_tokens=cfg.interpret_max_tokens, temperature=cfg.interpret_temperature,
            )

        extraction = extract_flight_plan(raw)
        if extraction.ok:
            candidate = extraction.plan
        else:
            # fail-soft: a confusing message still gets a generic itinerary
            log_event("extraction_fallback", level="WARNING", error=str(extraction.error), raw_text=raw)
            candidate = default_flight_plan(cfg.fallback_origin, cfg.fallback_destination)

        validation = validate_flight_plan(candidate)
        if not validation.is_valid:
            log_event("flight_plan_invalid", level="WARNING", errors=validation.errors)
            return PipelineResult(
                success=False,
                summary_text=INVALID_PLAN_TEXT,
                error_code=INVALID_FLIGHT_PLAN,
                error="; ".join(validation.errors),
            )

        plan = self._resolve_locations(validation.plan)
        query = plan.to_query(today)
        log_event("query_normalized", origin=query.origin, destination=query.destination,
                  departure_date=query.departure_date, return_date=query.return_date,
                  passengers=query.passengers, cabin=query.cabin_class.value)

        with timed("provider"):
            offers = await self.provider.search(query)

        selection = rank_offers(offers, order=cfg.sort_order, limit=cfg.max_results)
        data = PipelineData(
            query=query,
            offers=list(selection.offers),
            origin_airport=self._airport(query.origin),
            destination_airport=self._airport(query.destination),
        )
        if selection.best is None:
            log_event("no_offers", origin=query.origin, destination=query.destination)
            return PipelineResult(success=False, summary_text=NO_OFFERS_TEXT,
                                  error_code=NO_OFFERS, data=data)

        log_event("offer_selected", offer_id=selection.best.id, price=str(selection.best.price.amount),
                  currency=selection.best.price.currency, candidates=len(offers))
        await self._remember_flights(query, list(selection.offers), context)

        with timed("summarize"):
            summary = await summarize_offers(
                self.model, format_offer_digest(selection), cfg.agent_name,
                max_tokens=cfg.summary_max_tokens, temperature=cfg.summary_temperature,
            )
        await record_best_effort(self.memory, "messages", summary_message_record(summary, context))

        log_event("pipeline_success", summary_text=summary)
        return PipelineResult(success=True, summary_text=summary, data=data)

    def _resolve_locations(self, plan: FlightPlanSchema) -> FlightPlanSchema:
        """Swap city names ('London') for their first airport code when the table knows them."""
        if self.airports is None:
            return plan
        update = {}
        for field in ("origin", "destination"):
            value = getattr(plan, field)
            if self.airports.lookup(value):
                continue
            codes = self.airports.resolve(value)
            if codes:
                update[field] = codes[0]
        return plan.model_copy(update=update) if update else plan

    def _airport(self, code: str):
        return self.airports.lookup(code) if self.airports else None

    async def _remember_flights(self, query: FlightQuery, offers: List[Offer], context: Dict[str, Any]) -> None:
        await record_best_effort(self.memory, "flight_data", flight_data_record(query, offers, context))

    def _failure(self, detail: str) -> PipelineResult:
        return PipelineResult(
            success=False,
            summary_text=FAILURE_TEXT,
            error_code=RESOURCE_CREATION_FAILED,
            error=detail,
        )
