"""Dispatch a candidate model to its provider adapter."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.ai_router.adapters import ProviderAdapter
from src.ai_router.exceptions import BackendUnavailableError
from src.ai_router.types import (
    ChatMessage,
    ExecutionResult,
    ModelDescriptor,
    ProviderName,
    RequestOptions,
)


class ModelExecutor:
    """Selects the adapter for a descriptor's provider tag and runs it."""

    def __init__(self, adapters: Mapping[ProviderName, ProviderAdapter]) -> None:
        self._adapters = dict(adapters)

    def ensure_covers(self, providers: Iterable[ProviderName]) -> None:
        """Raise ValueError if any provider lacks an adapter."""
        missing = sorted(p.value for p in providers if p not in self._adapters)
        if missing:
            raise ValueError(f"No adapter registered for providers: {', '.join(missing)}")

    def configured_providers(self) -> list[ProviderName]:
        return [name for name, adapter in self._adapters.items() if adapter.is_configured]

    async def execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        adapter = self._adapters.get(model.provider)
        if adapter is None:
            raise BackendUnavailableError(model.provider, model.id)
        return await adapter.execute(model, messages, options)

    async def aclose(self) -> None:
        for adapter in self._adapters.values():
            await adapter.aclose()
