"""Provider adapters, one per ProviderName."""

from __future__ import annotations

from src.ai_router.adapters.base import (
    ProviderAdapter,
    estimate_tokens,
    estimate_usage,
    flatten_messages,
)
from src.ai_router.adapters.chat_completion import AIMLAPIAdapter, GroqAdapter
from src.ai_router.adapters.gemini import GeminiAdapter
from src.ai_router.options import ProviderCredentials
from src.ai_router.types import ProviderName


def build_adapters(credentials: ProviderCredentials) -> dict[ProviderName, ProviderAdapter]:
    """Construct every provider adapter. Missing keys yield unconfigured adapters."""
    return {
        ProviderName.GROQ: GroqAdapter(credentials.groq_api_key),
        ProviderName.GEMINI: GeminiAdapter(
            credentials.gemini_api_key,
            base_url=credentials.gemini_base_url,
            timeout_seconds=credentials.http_timeout_seconds,
        ),
        ProviderName.AIMLAPI: AIMLAPIAdapter(
            credentials.aimlapi_key,
            api_base=credentials.aimlapi_base_url,
        ),
    }


__all__ = [
    "AIMLAPIAdapter",
    "GeminiAdapter",
    "GroqAdapter",
    "ProviderAdapter",
    "build_adapters",
    "estimate_tokens",
    "estimate_usage",
    "flatten_messages",
]
