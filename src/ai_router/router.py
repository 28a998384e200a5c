"""Model router - selection, execution and sequential fallback.

Per request the router moves through:

    SELECTING -> TRYING(candidate_i) -> SUCCESS
                                     -> TRYING(candidate_i+1)
                                     -> EXHAUSTED

Candidates are tried strictly one at a time. Every attempt updates the
health tracker; successful attempts also update the cost tracker. Provider
errors are recovered locally while fallback is enabled; exhausting every
candidate raises AllModelsFailedError. With fallback disabled the first
error is re-raised unchanged.

The router owns no global state. The application constructs one instance at
startup (see create_model_router) and passes it to whoever needs it; tests
build isolated instances with fresh trackers.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog

from src.ai_router.adapters import ProviderAdapter, build_adapters
from src.ai_router.catalog import ModelCatalog
from src.ai_router.costs import CostAnalytics, CostTracker, calculate_cost
from src.ai_router.exceptions import (
    AllModelsFailedError,
    AttemptFailure,
    NoModelsAvailableError,
)
from src.ai_router.executor import ModelExecutor
from src.ai_router.health import HealthTracker
from src.ai_router.options import ProviderCredentials, RouterConfig
from src.ai_router.selector import ModelSelector
from src.ai_router.types import (
    ChatMessage,
    ExecutionResult,
    ModelDescriptor,
    ModelHealth,
    ModelRequest,
    ModelResponse,
    ProviderName,
    RequestOptions,
    TaskType,
)

if TYPE_CHECKING:
    from src.config import Settings

log = structlog.get_logger(__name__)

_RATE_LIMIT_MARKERS = ("rate limit", "429", "quota")


def is_rate_limit_error(exc: BaseException) -> bool:
    """Case-insensitive check of the error text for rate-limit indicators."""
    message = str(exc).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


class ModelRouter:
    """Routes completion requests across providers with fallback."""

    def __init__(
        self,
        catalog: ModelCatalog,
        executor: ModelExecutor,
        config: RouterConfig | None = None,
        *,
        health_tracker: HealthTracker | None = None,
        cost_tracker: CostTracker | None = None,
    ) -> None:
        executor.ensure_covers(catalog.providers())

        self._catalog = catalog
        self._selector = ModelSelector(catalog)
        self._executor = executor
        self._config = config or RouterConfig()
        self._health = health_tracker or HealthTracker()
        self._costs = cost_tracker or CostTracker()

        log.info(
            "model_router.initialized",
            model_count=len(catalog),
            configured_providers=[p.value for p in executor.configured_providers()],
            default_priority=self._config.default_priority.value,
            fallback_enabled=self._config.enable_fallback,
        )

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def executor(self) -> ModelExecutor:
        return self._executor

    async def route_request(self, request: ModelRequest) -> ModelResponse:
        """Route a request to the best available model.

        Raises:
            NoModelsAvailableError: No candidate matches the task type/cost ceiling
            AllModelsFailedError: Every candidate failed (fallback enabled)
            Exception: The first provider error, unchanged, when fallback
                is disabled
        """
        start = time.perf_counter()
        task_type = request.task_type or TaskType.GENERAL
        priority = request.priority or self._config.default_priority
        fallback_enabled = self._config.enable_fallback and request.fallback_enabled

        candidates = self._selector.select_models(
            task_type, priority, request.max_cost_per_request
        )
        if not candidates:
            log.warning(
                "model_router.no_candidates",
                task_type=task_type.value,
                priority=priority.value,
                max_cost=request.max_cost_per_request,
            )
            raise NoModelsAvailableError(
                task_type.value, priority.value, request.max_cost_per_request
            )

        messages = request.normalized_messages()
        options = RequestOptions(
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            stream=request.stream,
        )
        attempted: list[str] = []
        failures: list[AttemptFailure] = []

        for index, model in enumerate(candidates):
            attempted.append(model.id)
            log.info(
                "model_router.attempting",
                provider=model.provider.value,
                model=model.id,
                attempt=index + 1,
                candidate_count=len(candidates),
            )

            attempt_start = time.perf_counter()
            try:
                result = await self._execute_attempt(model, messages, options)
            except Exception as exc:
                rate_limited = is_rate_limit_error(exc)
                await self._health.record_failure(model, rate_limited=rate_limited)
                failures.append(
                    AttemptFailure(model=model.id, provider=model.provider.value, error=exc)
                )

                log.warning(
                    "model_router.attempt_failed",
                    provider=model.provider.value,
                    model=model.id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                    rate_limited=rate_limited,
                    remaining_candidates=len(candidates) - index - 1,
                )

                if not fallback_enabled:
                    log.error(
                        "model_router.request_failed",
                        task_type=task_type.value,
                        attempted_models=attempted,
                        fallback_enabled=False,
                    )
                    raise
                continue

            now = time.perf_counter()
            attempt_latency_ms = (now - attempt_start) * 1000
            latency_ms = (now - start) * 1000
            cost = calculate_cost(model, result.usage)

            if self._config.enable_cost_tracking:
                await self._costs.record(model.provider.value, cost, task_type.value)
            await self._health.record_success(model, attempt_latency_ms)

            log.info(
                "model_router.request_succeeded",
                provider=model.provider.value,
                model=model.id,
                task_type=task_type.value,
                priority=priority.value,
                total_tokens=result.usage.total_tokens,
                usage_estimated=result.usage_estimated,
                cost=cost,
                latency_ms=round(latency_ms, 2),
                fallback_used=len(attempted) > 1,
            )

            return ModelResponse(
                content=result.content,
                model=model.id,
                provider=model.provider,
                usage=result.usage,
                cost=cost,
                latency_ms=latency_ms,
                fallback_used=len(attempted) > 1,
                attempted_models=attempted,
            )

        log.error(
            "model_router.all_models_failed",
            task_type=task_type.value,
            attempted_models=attempted,
            failures=[f.to_dict() for f in failures],
        )
        raise AllModelsFailedError(failures) from failures[-1].error

    async def _execute_attempt(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        timeout = self._config.attempt_timeout_seconds
        if timeout is None:
            return await self._executor.execute(model, messages, options)
        async with asyncio.timeout(timeout):
            return await self._executor.execute(model, messages, options)

    def get_available_models(self) -> tuple[ModelDescriptor, ...]:
        return self._catalog.get_available_models()

    def get_health_status(self) -> list[ModelHealth]:
        return self._health.snapshot()

    def get_cost_analytics(self) -> CostAnalytics:
        return self._costs.analytics()

    async def aclose(self) -> None:
        await self._executor.aclose()


def create_model_router(
    settings: Settings,
    *,
    catalog: ModelCatalog | None = None,
    adapters: Mapping[ProviderName, ProviderAdapter] | None = None,
) -> ModelRouter:
    """Build a router from application settings.

    Args:
        settings: Application settings with provider keys and routing policy
        catalog: Optional catalog. If None, uses the default models.
        adapters: Optional provider->adapter map. If None, built from settings.
    """
    if adapters is None:
        adapters = build_adapters(ProviderCredentials.from_settings(settings))
    return ModelRouter(
        catalog=catalog or ModelCatalog(),
        executor=ModelExecutor(adapters),
        config=RouterConfig.from_settings(settings),
    )
