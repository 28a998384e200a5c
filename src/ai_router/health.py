"""Per-model liveness tracking.

A record is created the first time a model is attempted and lives for the
whole process. Update rule, applied after every attempt:

- success: failure_count = max(0, failure_count - 1),
  average_latency = (average_latency + latency) / 2
- failure: failure_count += 1, average_latency unchanged
- both:    is_healthy = failure_count < 3

A record created by a success is seeded with that latency; a record created
by a failure starts at 0 ms and blends like any other. This is a
liveness heuristic, not a circuit breaker: unhealthy models are still tried.
"""

from __future__ import annotations

import asyncio
import copy
from datetime import UTC, datetime, timedelta

import structlog

from src.ai_router.types import ModelDescriptor, ModelHealth

log = structlog.get_logger(__name__)

UNHEALTHY_FAILURE_THRESHOLD = 3

# Assumed rate-limit window when the provider does not say when it resets
RATE_LIMIT_WINDOW = timedelta(seconds=60)


class HealthTracker:
    """Process-wide health map keyed by ``provider:model``."""

    def __init__(self) -> None:
        self._records: dict[str, ModelHealth] = {}
        self._lock = asyncio.Lock()

    def _get_or_create(self, model: ModelDescriptor) -> tuple[ModelHealth, bool]:
        key = f"{model.provider.value}:{model.id}"
        record = self._records.get(key)
        if record is None:
            record = ModelHealth(provider=model.provider, model=model.id)
            self._records[key] = record
            return record, True
        return record, False

    async def record_success(self, model: ModelDescriptor, latency_ms: float) -> ModelHealth:
        async with self._lock:
            record, created = self._get_or_create(model)
            if created:
                record.average_latency_ms = latency_ms
            else:
                record.average_latency_ms = (record.average_latency_ms + latency_ms) / 2
            record.failure_count = max(0, record.failure_count - 1)
            record.is_healthy = record.failure_count < UNHEALTHY_FAILURE_THRESHOLD
            record.total_successes += 1
            record.rate_limit_hit = False
            record.rate_limit_reset_at = None
            record.last_checked = datetime.now(UTC)
            return copy.copy(record)

    async def record_failure(
        self,
        model: ModelDescriptor,
        *,
        rate_limited: bool = False,
    ) -> ModelHealth:
        async with self._lock:
            record, _ = self._get_or_create(model)
            now = datetime.now(UTC)
            record.failure_count += 1
            record.is_healthy = record.failure_count < UNHEALTHY_FAILURE_THRESHOLD
            record.total_failures += 1
            record.last_checked = now
            if rate_limited:
                record.rate_limit_hit = True
                record.rate_limit_reset_at = now + RATE_LIMIT_WINDOW

            if not record.is_healthy:
                log.warning(
                    "model_health.unhealthy",
                    key=record.key,
                    failure_count=record.failure_count,
                )
            return copy.copy(record)

    def get(self, model: ModelDescriptor) -> ModelHealth | None:
        record = self._records.get(f"{model.provider.value}:{model.id}")
        return copy.copy(record) if record else None

    def snapshot(self) -> list[ModelHealth]:
        """Copies of every record, in first-use order."""
        return [copy.copy(r) for r in self._records.values()]
