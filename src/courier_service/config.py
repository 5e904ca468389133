"""Service configuration loaded from environment variables and an optional .env file."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Courier service settings. Durations are configured in milliseconds."""

    # Conversion provider
    conversion_api_url: str = "http://localhost:8081"
    conversion_poll_interval_ms: float = Field(200, ge=0)
    conversion_timeout_ms: float = Field(5000, gt=0)
    conversion_max_polls: int | None = Field(None, ge=0)

    # Location API
    location_api_url: str = "http://localhost:8082"
    http_timeout_sec: float = Field(10.0, gt=0)

    # Shipping pricing
    shipping_base_fee_cents: float = 500
    shipping_rate_per_km_kg_cents: float = 0.5

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def conversion_poll_interval_sec(self) -> float:
        return self.conversion_poll_interval_ms / 1000

    @property
    def conversion_timeout_sec(self) -> float:
        return self.conversion_timeout_ms / 1000


def load_settings() -> Settings:
    """Read settings once; callers pass the result down."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Keep noisy libraries at WARNING
    logging.getLogger("urllib3").setLevel(logging.WARNING)
