"""Provider adapter contract.

Every provider has exactly one adapter subclass. An adapter translates the
normalized message list into the provider's native call and the provider's
reply back into an ExecutionResult. Adapters never swallow provider errors:
whatever the transport raises reaches the router unchanged.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar

import structlog
from pydantic import SecretStr

from src.ai_router.exceptions import BackendUnavailableError
from src.ai_router.types import (
    ChatMessage,
    ExecutionResult,
    ModelDescriptor,
    ProviderName,
    RequestOptions,
    TokenUsage,
)

log = structlog.get_logger(__name__)

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7

# Rough characters-per-token ratio for English text
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate token count as ceil(len(text) / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_usage(prompt_text: str, completion_text: str) -> TokenUsage:
    prompt_tokens = estimate_tokens(prompt_text)
    completion_tokens = estimate_tokens(completion_text)
    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


def flatten_messages(messages: list[ChatMessage]) -> str:
    """Collapse a conversation into one role-prefixed text block."""
    return "\n".join(f"{m.role.value}: {m.content}" for m in messages)


class ProviderAdapter(ABC):
    """Base class for provider adapters.

    Subclasses set ``provider`` and implement ``_execute()``. The public
    ``execute()`` refuses to run when no credential was configured.
    """

    provider: ClassVar[ProviderName]

    def __init__(self, api_key: SecretStr | None) -> None:
        self._api_key = api_key

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None and bool(self._api_key.get_secret_value())

    def _secret(self) -> str:
        return self._api_key.get_secret_value() if self._api_key else ""

    async def execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        """Run one completion against this provider.

        Raises:
            BackendUnavailableError: Adapter has no credential
            Exception: Any transport or provider error, unchanged
        """
        if not self.is_configured:
            raise BackendUnavailableError(self.provider, model.id)

        if options.stream:
            log.debug(
                "provider_adapter.stream_not_supported",
                provider=self.provider.value,
                model=model.id,
            )

        result = await self._execute(model, messages, options)

        log.debug(
            "provider_adapter.completed",
            provider=self.provider.value,
            model=model.id,
            total_tokens=result.usage.total_tokens,
            usage_estimated=result.usage_estimated,
        )
        return result

    @abstractmethod
    async def _execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        """Provider-specific call."""

    async def aclose(self) -> None:
        """Release pooled resources. No-op for adapters without a client."""
