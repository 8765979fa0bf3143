from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"
    TZ: str = "UTC"
    AGENT_NAME: str = "Easeflyt"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    INTERPRET_MAX_TOKENS: int = 500
    INTERPRET_TEMPERATURE: float = 0.7
    SUMMARY_MAX_TOKENS: int = 500
    SUMMARY_TEMPERATURE: float = 0.7

    # Flight providers
    FLIGHT_PROVIDER: Literal["auto", "amadeus", "duffel", "mock"] = "auto"
    AMADEUS_CLIENT_ID: Optional[str] = None
    AMADEUS_CLIENT_SECRET: Optional[str] = None
    AMADEUS_ENV: str = "sandbox"  # or "production"
    DUFFEL_ACCESS_TOKEN: Optional[str] = None

    # Pipeline policy
    FALLBACK_ORIGIN: str = "JFK"
    FALLBACK_DESTINATION: str = "LAX"
    OFFER_SORT_ORDER: Literal["asc", "desc"] = "asc"
    PIPELINE_TIMEOUT_SECONDS: float = 90.0
    AIRPORTS_CSV: str = "data/airports.csv"

    # Redis (memory sink); empty means in-process memory
    REDIS_URL: Optional[str] = None
    MEMORY_TTL_SECONDS: int = 86400  # 1 day

    # read .env and ignore any extra keys so this doesn't break again
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolved_provider(self) -> str:
        """Pick the provider for FLIGHT_PROVIDER=auto from available credentials."""
        if self.FLIGHT_PROVIDER != "auto":
            return self.FLIGHT_PROVIDER
        if self.AMADEUS_CLIENT_ID and self.AMADEUS_CLIENT_SECRET:
            return "amadeus"
        if self.DUFFEL_ACCESS_TOKEN:
            return "duffel"
        return "mock"

settings = Settings()
