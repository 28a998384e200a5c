"""
Shared test fixtures for pytest.

Provides common fakes and test data for all test modules:
- fake_settings: Test environment configuration with dummy provider keys
- ScriptedAdapter: provider adapter that replays scripted results/errors
- chat_catalog: three chat models A (groq), B (gemini), C (aimlapi)
- make_router: builds an isolated ModelRouter over scripted adapters
- test_app / client: FastAPI app and async HTTP client around a router
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from pydantic import SecretStr

from src.ai_router import (
    ModelCatalog,
    ModelDescriptor,
    ModelExecutor,
    ModelRouter,
    ProviderName,
    RouterConfig,
    TaskType,
)
from src.ai_router.adapters import ProviderAdapter
from src.ai_router.types import (
    ChatMessage,
    CostRates,
    ExecutionResult,
    ModelCapabilities,
    RateLimits,
    RequestOptions,
    TokenUsage,
)
from src.config import Environment, Settings, get_settings
from src.telemetry import clear_context


# ------------------------------------------------------------------ #
# Session-scoped: clear settings cache between test sessions
# ------------------------------------------------------------------ #

@pytest.fixture(autouse=True, scope="session")
def _clear_settings_cache():
    """Clear the lru_cache on get_settings so test overrides take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _clear_log_context():
    yield
    clear_context()


# ------------------------------------------------------------------ #
# Settings
# ------------------------------------------------------------------ #

@pytest.fixture
def fake_settings() -> Settings:
    """Test environment settings with safe defaults."""
    return Settings(
        environment=Environment.TEST,
        groq_api_key="gsk-test",
        gemini_api_key="gemini-test",
        aimlapi_key="aiml-test",
        debug=True,
    )


# ------------------------------------------------------------------ #
# Scripted provider adapter
# ------------------------------------------------------------------ #

DEFAULT_USAGE = TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15)


class ScriptedAdapter(ProviderAdapter):
    """Adapter whose outcomes are scripted per model id.

    Each entry in ``script[model_id]`` is consumed in order; an Exception
    instance is raised, an ExecutionResult is returned. When a model's
    script is empty, a default successful result is returned.
    """

    def __init__(
        self,
        provider: ProviderName,
        *,
        configured: bool = True,
        script: dict[str, list[ExecutionResult | Exception]] | None = None,
    ) -> None:
        super().__init__(SecretStr("test-key") if configured else None)
        self.provider = provider
        self.script: dict[str, list[ExecutionResult | Exception]] = script or {}
        self.calls: list[tuple[str, list[ChatMessage], RequestOptions]] = []
        self.closed = False

    async def _execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        self.calls.append((model.id, messages, options))
        queue = self.script.get(model.id) or []
        if queue:
            outcome = queue.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return ExecutionResult(content=f"reply from {model.id}", usage=DEFAULT_USAGE)

    async def aclose(self) -> None:
        self.closed = True


def make_descriptor(
    model_id: str,
    provider: ProviderName,
    *,
    priority: int,
    cost_in: float,
    cost_out: float,
    task_types: set[TaskType] | None = None,
) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        name=model_id.upper(),
        provider=provider,
        task_types=frozenset(task_types or {TaskType.CHAT, TaskType.GENERAL}),
        context_window=8192,
        cost_per_million=CostRates(input=cost_in, output=cost_out),
        rate_limit=RateLimits(requests_per_minute=60, tokens_per_minute=60_000),
        capabilities=ModelCapabilities(streaming=True),
        priority=priority,
    )


@pytest.fixture
def chat_catalog() -> ModelCatalog:
    """Three chat models: A is fastest, B is cheapest, C is top rank."""
    return ModelCatalog(
        [
            make_descriptor("model-a", ProviderName.GROQ, priority=1, cost_in=1.0, cost_out=2.0),
            make_descriptor("model-b", ProviderName.GEMINI, priority=2, cost_in=0.1, cost_out=0.2),
            make_descriptor("model-c", ProviderName.AIMLAPI, priority=3, cost_in=0.5, cost_out=1.0),
        ]
    )


@pytest.fixture
def scripted_adapters() -> dict[ProviderName, ScriptedAdapter]:
    return {provider: ScriptedAdapter(provider) for provider in ProviderName}


@pytest.fixture
def make_router(
    chat_catalog: ModelCatalog,
    scripted_adapters: dict[ProviderName, ScriptedAdapter],
) -> Callable[..., ModelRouter]:
    """Factory for routers over the chat catalog and scripted adapters."""

    def _make(config: RouterConfig | None = None, **kwargs: Any) -> ModelRouter:
        return ModelRouter(
            catalog=kwargs.pop("catalog", chat_catalog),
            executor=ModelExecutor(kwargs.pop("adapters", scripted_adapters)),
            config=config,
            **kwargs,
        )

    return _make


# ------------------------------------------------------------------ #
# App & HTTP client
# ------------------------------------------------------------------ #

@pytest.fixture
def test_app(
    fake_settings: Settings,
    make_router: Callable[..., ModelRouter],
) -> FastAPI:
    """FastAPI app wired to a router over scripted adapters."""
    from src.main import create_app

    return create_app(settings=fake_settings, model_router=make_router())


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client for testing the FastAPI application.

    Uses httpx.AsyncClient with ASGITransport to test the app without
    spinning up a real HTTP server.
    """
    transport = httpx.ASGITransport(app=test_app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as ac:
        yield ac
