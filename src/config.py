"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (or a .env file in dev).
This is the single source of truth for configuration - nothing is hardcoded
elsewhere. Provider credentials are optional: a missing key disables that
provider's adapter instead of failing startup.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.ai_router.types import PriorityMode


class Environment(StrEnum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Application
    # ------------------------------------------------------------------ #
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins. In production, set to the dashboard URL.",
    )

    # ------------------------------------------------------------------ #
    # Provider credentials
    # ------------------------------------------------------------------ #
    groq_api_key: SecretStr | None = Field(
        default=None,
        description="Groq API key. Leave unset to disable the Groq adapter.",
    )
    gemini_api_key: SecretStr | None = Field(
        default=None,
        description="Google Gemini API key. Leave unset to disable the Gemini adapter.",
    )
    aimlapi_key: SecretStr | None = Field(
        default=None,
        description="AI/ML API key. Leave unset to disable the AI/ML API adapter.",
    )
    aimlapi_base_url: str = Field(
        default="https://api.aimlapi.com/v1",
        description="OpenAI-compatible base URL of the AI/ML API",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini generateContent API",
    )
    provider_http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Transport timeout for direct HTTP provider calls",
    )

    # ------------------------------------------------------------------ #
    # Model Routing
    # ------------------------------------------------------------------ #
    router_default_priority: PriorityMode = Field(
        default=PriorityMode.BALANCED,
        description="Priority mode used when a request does not specify one",
    )
    router_enable_fallback: bool = Field(
        default=True,
        description="Try the next candidate model when one fails",
    )
    router_enable_cost_tracking: bool = Field(
        default=True,
        description="Accumulate per-provider cost of successful requests",
    )
    router_health_check_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Reserved for active health polling; no polling loop runs yet",
    )
    router_attempt_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description=(
            "Per-attempt timeout for a single provider call. "
            "Unset means no timeout beyond the transport's own."
        ),
    )

    # ------------------------------------------------------------------ #
    # Derived / Computed
    # ------------------------------------------------------------------ #
    @model_validator(mode="after")
    def _set_debug_from_env(self) -> Settings:
        if self.environment == Environment.DEV:
            self.debug = True
        return self

    @property
    def is_dev(self) -> bool:
        return self.environment in (Environment.DEV, Environment.TEST)

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PROD


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings singleton.

    Use FastAPI dependency injection via Depends(get_settings) in endpoints,
    or call directly in non-request contexts (startup, scripts).
    """
    return Settings()
