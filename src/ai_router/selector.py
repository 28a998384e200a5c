"""Candidate selection: filter the catalog and order it by priority mode.

Ordering rules:
- speed:    ascending priority rank
- cost:     ascending input+output rate
- quality:  descending priority rank (literal inverse of speed)
- balanced: same as speed

The quality ordering reuses the speed rank, so "slowest" and "best" are the
same thing here. Models would need a separate quality rank to decouple them.

All sorts are stable, so catalog order breaks ties.
"""

from __future__ import annotations

import structlog

from src.ai_router.catalog import ModelCatalog
from src.ai_router.types import ModelDescriptor, PriorityMode, TaskType

log = structlog.get_logger(__name__)

# Token count used to turn per-million rates into a comparable per-request estimate
REFERENCE_TOKENS = 1000


def estimate_reference_cost(model: ModelDescriptor, tokens: int = REFERENCE_TOKENS) -> float:
    """Estimated USD cost of ``tokens`` charged at input+output rates."""
    return model.cost_per_million.combined / 1_000_000 * tokens


class ModelSelector:
    """Turns a task type and priority mode into an ordered candidate list."""

    def __init__(self, catalog: ModelCatalog) -> None:
        self._catalog = catalog

    def select_models(
        self,
        task_type: TaskType,
        priority: PriorityMode,
        max_cost_per_request: float | None = None,
    ) -> list[ModelDescriptor]:
        """Return candidates for a request, best first.

        An empty list means no model supports the task type within the cost
        ceiling. That is not an error here; the router decides what to do.
        """
        candidates = [m for m in self._catalog.get_available_models() if m.supports(task_type)]

        if max_cost_per_request is not None:
            candidates = [
                m for m in candidates if estimate_reference_cost(m) <= max_cost_per_request
            ]

        if priority == PriorityMode.COST:
            candidates.sort(key=lambda m: m.cost_per_million.combined)
        elif priority == PriorityMode.QUALITY:
            candidates.sort(key=lambda m: m.priority, reverse=True)
        else:
            candidates.sort(key=lambda m: m.priority)

        log.debug(
            "model_selector.selected",
            task_type=task_type.value,
            priority=priority.value,
            max_cost=max_cost_per_request,
            candidates=[m.id for m in candidates],
        )
        return candidates
