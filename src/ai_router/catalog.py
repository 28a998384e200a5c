"""Static catalog of routable models.

The catalog is constant data built at process start. Adding or removing a
model is a deployment-time change; nothing mutates the catalog at runtime.
Order matters only as the tie-breaker for the selector's stable sort.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from src.ai_router.types import (
    CostRates,
    ModelCapabilities,
    ModelDescriptor,
    ProviderName,
    RateLimits,
    TaskType,
)

log = structlog.get_logger(__name__)


DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    # Groq: fastest, primary for chat
    ModelDescriptor(
        id="llama-3.3-70b-versatile",
        name="LLaMA 3.3 70B",
        provider=ProviderName.GROQ,
        task_types=frozenset({TaskType.CHAT, TaskType.GENERAL, TaskType.REASONING}),
        context_window=32_768,
        cost_per_million=CostRates(input=0.59, output=0.79),
        rate_limit=RateLimits(requests_per_minute=30, tokens_per_minute=14_400),
        capabilities=ModelCapabilities(streaming=True, functions=True),
        priority=1,
    ),
    # Gemini: multimodal, cheapest per token
    ModelDescriptor(
        id="gemini-2.0-flash-exp",
        name="Gemini 2.0 Flash",
        provider=ProviderName.GEMINI,
        task_types=frozenset(
            {
                TaskType.CHAT,
                TaskType.VISION,
                TaskType.GENERAL,
                TaskType.REASONING,
                TaskType.EMBEDDING,
            }
        ),
        context_window=32_768,
        cost_per_million=CostRates(input=0.075, output=0.30),
        rate_limit=RateLimits(requests_per_minute=15, tokens_per_minute=4_000),
        capabilities=ModelCapabilities(streaming=True, vision=True, audio=True),
        priority=2,
    ),
    # OpenAI via AI/ML API
    ModelDescriptor(
        id="gpt-3.5-turbo",
        name="GPT-3.5 Turbo",
        provider=ProviderName.AIMLAPI,
        task_types=frozenset(
            {TaskType.CHAT, TaskType.GENERAL, TaskType.CODE, TaskType.REASONING}
        ),
        context_window=16_384,
        cost_per_million=CostRates(input=0.5, output=1.5),
        rate_limit=RateLimits(requests_per_minute=60, tokens_per_minute=90_000),
        capabilities=ModelCapabilities(streaming=True, functions=True),
        priority=3,
    ),
    # Claude via AI/ML API
    ModelDescriptor(
        id="claude-3-haiku-20240307",
        name="Claude 3 Haiku",
        provider=ProviderName.AIMLAPI,
        task_types=frozenset(
            {TaskType.CHAT, TaskType.GENERAL, TaskType.CODE, TaskType.REASONING}
        ),
        context_window=200_000,
        cost_per_million=CostRates(input=0.25, output=1.25),
        rate_limit=RateLimits(requests_per_minute=50, tokens_per_minute=50_000),
        capabilities=ModelCapabilities(streaming=True),
        priority=4,
    ),
)


class ModelCatalog:
    """Read-only, ordered collection of model descriptors."""

    def __init__(self, models: Iterable[ModelDescriptor] | None = None) -> None:
        entries = tuple(DEFAULT_MODELS if models is None else models)

        seen: set[str] = set()
        for model in entries:
            if model.id in seen:
                raise ValueError(f"Duplicate model id in catalog: {model.id}")
            seen.add(model.id)

        self._models = entries
        self._by_id = {model.id: model for model in entries}

        log.info(
            "model_catalog.initialized",
            model_count=len(entries),
            models=[model.id for model in entries],
        )

    def get_available_models(self) -> tuple[ModelDescriptor, ...]:
        """Return every descriptor in catalog order."""
        return self._models

    def get(self, model_id: str) -> ModelDescriptor | None:
        return self._by_id.get(model_id)

    def providers(self) -> set[ProviderName]:
        return {model.provider for model in self._models}

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self):
        return iter(self._models)
