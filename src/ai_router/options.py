"""Explicit router configuration values.

Built once at startup from Settings and passed into the router and adapter
constructors. Nothing in the router reads the environment directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import SecretStr

from src.ai_router.types import PriorityMode

if TYPE_CHECKING:
    from src.config import Settings


@dataclass(frozen=True)
class RouterConfig:
    """Routing policy defaults.

    Attributes:
        default_priority: Priority mode for requests that do not set one
        enable_fallback: Advance to the next candidate after a failure
        enable_cost_tracking: Accumulate cost of successful requests
        health_check_interval_seconds: Reserved; no polling loop reads it
        attempt_timeout_seconds: Per-attempt timeout, None for no timeout
    """

    default_priority: PriorityMode = PriorityMode.BALANCED
    enable_fallback: bool = True
    enable_cost_tracking: bool = True
    health_check_interval_seconds: float = 60.0
    attempt_timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.attempt_timeout_seconds is not None and self.attempt_timeout_seconds <= 0:
            raise ValueError("attempt_timeout_seconds must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> RouterConfig:
        return cls(
            default_priority=settings.router_default_priority,
            enable_fallback=settings.router_enable_fallback,
            enable_cost_tracking=settings.router_enable_cost_tracking,
            health_check_interval_seconds=settings.router_health_check_interval_seconds,
            attempt_timeout_seconds=settings.router_attempt_timeout_seconds,
        )


@dataclass(frozen=True)
class ProviderCredentials:
    """Per-provider API keys. A None key leaves that provider disabled."""

    groq_api_key: SecretStr | None = None
    gemini_api_key: SecretStr | None = None
    aimlapi_key: SecretStr | None = None
    aimlapi_base_url: str = "https://api.aimlapi.com/v1"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    http_timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderCredentials:
        return cls(
            groq_api_key=settings.groq_api_key,
            gemini_api_key=settings.gemini_api_key,
            aimlapi_key=settings.aimlapi_key,
            aimlapi_base_url=settings.aimlapi_base_url,
            gemini_base_url=settings.gemini_base_url,
            http_timeout_seconds=settings.provider_http_timeout_seconds,
        )
