"""Multi-provider AI model routing.

Selects among LLM providers (Groq, Gemini, AI/ML API) by task type and
priority mode, executes the request, tracks per-model health and cost, and
falls back across providers on failure.

The router is an explicitly constructed object; health and cost state live
on the instance, so two routers never share counters.
"""

from __future__ import annotations

from src.ai_router.catalog import DEFAULT_MODELS, ModelCatalog
from src.ai_router.costs import CostAnalytics, CostTracker, calculate_cost
from src.ai_router.exceptions import (
    AllModelsFailedError,
    AttemptFailure,
    BackendUnavailableError,
    ModelRouterError,
    NoModelsAvailableError,
)
from src.ai_router.executor import ModelExecutor
from src.ai_router.health import HealthTracker
from src.ai_router.options import ProviderCredentials, RouterConfig
from src.ai_router.router import ModelRouter, create_model_router, is_rate_limit_error
from src.ai_router.selector import ModelSelector, estimate_reference_cost
from src.ai_router.types import (
    ChatMessage,
    ModelDescriptor,
    ModelHealth,
    ModelRequest,
    ModelResponse,
    PriorityMode,
    ProviderName,
    TaskType,
    TokenUsage,
)

__all__ = [
    "DEFAULT_MODELS",
    "AllModelsFailedError",
    "AttemptFailure",
    "BackendUnavailableError",
    "ChatMessage",
    "CostAnalytics",
    "CostTracker",
    "HealthTracker",
    "ModelCatalog",
    "ModelDescriptor",
    "ModelExecutor",
    "ModelHealth",
    "ModelRequest",
    "ModelResponse",
    "ModelRouter",
    "ModelRouterError",
    "ModelSelector",
    "NoModelsAvailableError",
    "PriorityMode",
    "ProviderCredentials",
    "ProviderName",
    "RouterConfig",
    "TaskType",
    "TokenUsage",
    "calculate_cost",
    "create_model_router",
    "estimate_reference_cost",
    "is_rate_limit_error",
]
