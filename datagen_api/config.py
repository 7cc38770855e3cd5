"""API Configuration using pydantic-settings."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_plan_limits() -> dict[str, int]:
    return {
        "test": 1000,  # high enough for general test suites
        "free": 5,
        "pro": 100,
        "default": 5,  # fallback for a missing or unknown plan
    }


class ApiConfig(BaseSettings):
    """Configuration for datagen-api."""

    environment: str = "production"
    log_level: str = "INFO"

    # Server bind address, used by `python -m datagen_api`
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    # Key store. Empty redis_url = in-process memory store (development only)
    redis_url: str = ""
    # JSON mapping of api key -> {"enabled": bool, "plan": str}, loaded into the
    # in-memory store at startup, e.g. '{"dev-key": {"enabled": true, "plan": "pro"}}'
    bootstrap_api_keys: dict[str, dict[str, Any]] = Field(default_factory=dict)

    # Per-key fixed-window rate limiting
    plan_limits: dict[str, int] = Field(default_factory=_default_plan_limits)
    rate_window_seconds: int = 60

    # Exposes DELETE /test/rate-limit/{api_key}. Never enable in production.
    enable_test_routes: bool = False

    # Per-IP limiting (slowapi) on unauthenticated routes. Set
    # DATAGEN_API_RATE_LIMIT_ENABLED=false in tests
    rate_limit_enabled: bool = True
    rate_limit_public: str = "120/minute"

    # CORS: comma-separated list of allowed origins
    cors_allowed_origins: str = ""  # Empty = localhost:3000 only

    @property
    def uses_memory_store(self) -> bool:
        return not self.redis_url

    model_config = SettingsConfigDict(
        env_prefix="DATAGEN_API_",
        env_file=".env",
        extra="ignore",
    )
