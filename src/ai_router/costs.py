"""Request cost calculation and process-wide cost accounting.

Totals live in memory only; a restart starts from zero.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from src.ai_router.types import ModelDescriptor, TokenUsage

log = structlog.get_logger(__name__)


def calculate_cost(model: ModelDescriptor, usage: TokenUsage) -> float:
    """USD cost of a completion at the model's per-million rates."""
    input_cost = usage.prompt_tokens / 1_000_000 * model.cost_per_million.input
    output_cost = usage.completion_tokens / 1_000_000 * model.cost_per_million.output
    return input_cost + output_cost


@dataclass
class CostAnalytics:
    total_requests: int
    total_cost: float
    cost_by_provider: dict[str, float]
    cost_by_task_type: dict[str, float]
    period_start: datetime
    period_end: datetime
    average_cost_per_request: float = field(init=False)

    def __post_init__(self) -> None:
        self.average_cost_per_request = (
            self.total_cost / self.total_requests if self.total_requests > 0 else 0.0
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "total_requests": self.total_requests,
            "total_cost": self.total_cost,
            "cost_by_provider": dict(self.cost_by_provider),
            "cost_by_task_type": dict(self.cost_by_task_type),
            "average_cost_per_request": self.average_cost_per_request,
            "period": {
                "start": self.period_start.isoformat(),
                "end": self.period_end.isoformat(),
            },
        }


class CostTracker:
    """Accumulates request counts and cost for successful responses."""

    def __init__(self) -> None:
        self._requests = 0
        self._total_cost = 0.0
        self._by_provider: dict[str, float] = {}
        self._by_task_type: dict[str, float] = {}
        self._started_at = datetime.now(UTC)
        self._lock = asyncio.Lock()

    async def record(self, provider: str, cost: float, task_type: str | None = None) -> None:
        async with self._lock:
            self._requests += 1
            self._total_cost += cost
            self._by_provider[provider] = self._by_provider.get(provider, 0.0) + cost
            if task_type is not None:
                self._by_task_type[task_type] = self._by_task_type.get(task_type, 0.0) + cost

        log.debug(
            "cost_tracker.recorded",
            provider=provider,
            task_type=task_type,
            cost=cost,
        )

    def analytics(self) -> CostAnalytics:
        return CostAnalytics(
            total_requests=self._requests,
            total_cost=self._total_cost,
            cost_by_provider=dict(self._by_provider),
            cost_by_task_type=dict(self._by_task_type),
            period_start=self._started_at,
            period_end=datetime.now(UTC),
        )
