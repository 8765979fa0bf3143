from contextlib import asynccontextmanager
from typing import Any, Dict
from fastapi import FastAPI, HTTPException, Request
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from flightfinder.config import settings
from flightfinder.iata.lookup import AirportDb
from flightfinder.llm.client import OpenAIModel
from flightfinder.memory.recorder import InMemorySink, RedisMemorySink
from flightfinder.obs.logger import log_event
from flightfinder.obs.metrics import get_metrics_snapshot
from flightfinder.obs.middleware import ObservabilityMiddleware
from flightfinder.parse.relevance import is_flight_request
from flightfinder.pipeline import FlightSearchPipeline, PipelineConfig
from flightfinder.providers.base import create_provider

load_dotenv()


class SearchRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4096)
    context: Dict[str, Any] = Field(default_factory=dict)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log_event("startup", app_env=settings.APP_ENV, provider=settings.resolved_provider())

    app.state.airports = AirportDb(csv_path=settings.AIRPORTS_CSV)
    app.state.provider = create_provider(settings)
    if settings.REDIS_URL:
        app.state.memory = RedisMemorySink(settings.REDIS_URL, ttl_seconds=settings.MEMORY_TTL_SECONDS)
    else:
        app.state.memory = InMemorySink()
    app.state.pipeline = FlightSearchPipeline(
        model=OpenAIModel(model=settings.OPENAI_MODEL, api_key=settings.OPENAI_API_KEY),
        provider=app.state.provider,
        airports=app.state.airports,
        memory=app.state.memory,
        config=PipelineConfig.from_settings(settings),
    )

    yield

    # Shutdown
    aclose = getattr(app.state.provider, "aclose", None)
    if aclose:
        await aclose()
    log_event("shutdown")


app = FastAPI(
    title="Flight Finder",
    version="1.0.0",
    lifespan=lifespan
)


@app.get("/")
async def root():
    return {
        "service": "Flight Finder",
        "version": "1.0.0",
        "status": "running",
        "agent": settings.AGENT_NAME,
    }


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "flight-finder"}


@app.get("/metrics")
async def metrics():
    return get_metrics_snapshot()


@app.get("/flights/relevance")
async def relevance(request: Request, text: str):
    airports = getattr(request.app.state, "airports", None)
    if airports is None:
        return {"is_flight_request": is_flight_request(text)}
    return {"is_flight_request": is_flight_request(text, airports.place_names(), airports.codes)}


@app.post("/flights/search")
async def search_flights(request: Request, body: SearchRequest):
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Flight search unavailable")

    result = await pipeline.handle_with_timeout(body.text, body.context)
    return result.model_dump(mode="json")


# Apply middleware
asgi_app = ObservabilityMiddleware(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:asgi_app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level="info"
    )
