"""Exceptions raised by the model router.

Provider transport errors (litellm exceptions, httpx errors, timeouts) are
not wrapped; they propagate as-is so callers can inspect the original cause.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.ai_router.types import ProviderName


class ModelRouterError(Exception):
    """Base exception for all model router failures."""


class NoModelsAvailableError(ModelRouterError):
    """No catalog entry matches the task type and cost ceiling."""

    def __init__(self, task_type: str, priority: str, max_cost: float | None = None) -> None:
        self.task_type = task_type
        self.priority = priority
        self.max_cost = max_cost
        message = f"No models available for task type '{task_type}'"
        if max_cost is not None:
            message += f" within max cost {max_cost}"
        super().__init__(message)


class BackendUnavailableError(ModelRouterError):
    """A provider's client was never initialized (missing credential)."""

    def __init__(self, provider: ProviderName | str, model: str) -> None:
        self.provider = str(provider)
        self.model = model
        super().__init__(f"{self.provider} client not initialized (model {model})")


@dataclass(frozen=True)
class AttemptFailure:
    model: str
    provider: str
    error: BaseException

    def to_dict(self) -> dict[str, str]:
        return {
            "model": self.model,
            "provider": self.provider,
            "error_type": type(self.error).__name__,
            "error_message": str(self.error),
        }


class AllModelsFailedError(ModelRouterError):
    """Every candidate was attempted and failed."""

    def __init__(self, failures: list[AttemptFailure]) -> None:
        self.failures = list(failures)
        super().__init__(
            f"All {len(self.failures)} models failed: "
            + ", ".join(f.model for f in self.failures)
        )

    @property
    def attempted_models(self) -> list[str]:
        return [f.model for f in self.failures]

    @property
    def errors(self) -> list[BaseException]:
        return [f.error for f in self.failures]
