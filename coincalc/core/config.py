from functools import lru_cache

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coincalc.models.constants import FALLBACK_RATE

ALLOWED_RATE_PROVIDERS = {"static", "external-http"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_RATE_PROVIDER, FALLBACK_RATE, HTTP_TIMEOUT_SECONDS, HTTP_RETRIES).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Coin Asset Calculator"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rate source
    # Allowed: 'external-http' (live quote), 'static' (always the fallback rate)
    exchange_rate_provider: str = "external-http"
    exchange_api_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest/USD"  # type: ignore[assignment]
    quote_currency: str = "IDR"
    fallback_rate: float = Field(FALLBACK_RATE, gt=0)
    http_timeout_seconds: float = Field(5.0, gt=0)
    http_retries: int = Field(0, ge=0, le=5)

    # Seed the rate state once while the app starts
    fetch_rate_on_startup: bool = True

    @field_validator("exchange_rate_provider")
    @classmethod
    def known_provider(cls, v: str) -> str:
        if v not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{v}'. Allowed: {sorted(ALLOWED_RATE_PROVIDERS)}"
            )
        return v

    @field_validator("quote_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
