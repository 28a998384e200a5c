"""AI routing endpoints.

POST /ai/route    - route a completion request with automatic fallback
GET  /ai/route    - describe the router, models, task types and priority modes
GET  /ai/models   - full model catalog
GET  /ai/health   - per-model health records
GET  /ai/costs    - accumulated cost analytics

The router itself is created at application startup and injected through
get_model_router; handlers never construct one.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.ai_router import (
    AllModelsFailedError,
    ChatMessage,
    ModelDescriptor,
    ModelRequest,
    ModelRouter,
    NoModelsAvailableError,
    PriorityMode,
    TaskType,
)
from src.ai_router.types import MessageRole
from src.api.dependencies import get_model_router
from src.telemetry import bind_routing_context

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


class MessageBody(BaseModel):
    role: MessageRole
    content: str = Field(..., max_length=100_000)


class RouteRequestBody(BaseModel):
    prompt: str | None = Field(
        default=None,
        max_length=100_000,
        description="Single prompt. Ignored when messages are given.",
    )
    messages: list[MessageBody] | None = Field(
        default=None,
        description="Role-tagged conversation (system/user/assistant)",
    )
    task_type: TaskType = TaskType.GENERAL
    priority: PriorityMode | None = Field(
        default=None,
        description="Candidate ordering. Omit to use the router's default.",
    )
    max_tokens: int | None = Field(default=None, ge=1, le=32_768)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_cost: float | None = Field(
        default=None,
        ge=0.0,
        description="Maximum estimated cost per request in USD",
    )
    fallback_enabled: bool = True
    stream: bool = False


class UsageBody(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class RouteMetadata(BaseModel):
    model: str
    provider: str
    usage: UsageBody
    cost: float
    latency_ms: float
    fallback_used: bool
    attempted_models: list[str]


class RouteResponseBody(BaseModel):
    success: bool = True
    response: str
    metadata: RouteMetadata


def _model_summary(model: ModelDescriptor) -> dict[str, Any]:
    return {
        "id": model.id,
        "name": model.name,
        "provider": model.provider.value,
        "task_types": sorted(t.value for t in model.task_types),
        "context_window": model.context_window,
        "cost_per_million": {
            "input": model.cost_per_million.input,
            "output": model.cost_per_million.output,
        },
        "rate_limit": {
            "requests_per_minute": model.rate_limit.requests_per_minute,
            "tokens_per_minute": model.rate_limit.tokens_per_minute,
        },
        "capabilities": {
            "streaming": model.capabilities.streaming,
            "functions": model.capabilities.functions,
            "vision": model.capabilities.vision,
            "audio": model.capabilities.audio,
        },
        "priority": model.priority,
    }


@router.post(
    "/route",
    response_model=RouteResponseBody,
    summary="Route an AI request",
    description=(
        "Select the best model for the task type and priority mode, "
        "falling back to the next candidate when a provider fails."
    ),
)
async def route_ai_request(
    body: RouteRequestBody,
    model_router: ModelRouter = Depends(get_model_router),
) -> RouteResponseBody:
    if not body.prompt and not body.messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either prompt or messages is required",
        )

    priority = body.priority or model_router.config.default_priority
    bind_routing_context(body.task_type.value, priority.value)

    request = ModelRequest(
        prompt=body.prompt,
        messages=(
            [ChatMessage(role=m.role, content=m.content) for m in body.messages]
            if body.messages
            else None
        ),
        task_type=body.task_type,
        priority=priority,
        max_tokens=body.max_tokens,
        temperature=body.temperature,
        stream=body.stream,
        fallback_enabled=body.fallback_enabled,
        max_cost_per_request=body.max_cost,
    )

    try:
        result = await model_router.route_request(request)
    except NoModelsAvailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except AllModelsFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "All models failed",
                "attempted_models": exc.attempted_models,
                "failures": [f.to_dict() for f in exc.failures],
            },
        ) from exc
    except Exception as exc:
        log.error("ai_route.provider_error", error=str(exc), error_type=type(exc).__name__)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Failed to route AI request", "details": str(exc)},
        ) from exc

    return RouteResponseBody(
        response=result.content,
        metadata=RouteMetadata(
            model=result.model,
            provider=result.provider.value,
            usage=UsageBody(**result.usage.to_dict()),
            cost=result.cost,
            latency_ms=result.latency_ms,
            fallback_used=result.fallback_used,
            attempted_models=result.attempted_models,
        ),
    )


@router.get("/route", summary="Describe the AI router")
async def describe_router(
    model_router: ModelRouter = Depends(get_model_router),
) -> dict[str, Any]:
    return {
        "success": True,
        "description": "AI model routing with automatic fallback",
        "endpoint": "POST /api/v1/ai/route",
        "default_priority": model_router.config.default_priority.value,
        "fallback_enabled": model_router.config.enable_fallback,
        "configured_providers": [
            p.value for p in model_router.executor.configured_providers()
        ],
        "available_models": [
            {
                "id": m.id,
                "provider": m.provider.value,
                "name": m.name,
                "priority": m.priority,
            }
            for m in model_router.get_available_models()
        ],
        "task_types": [t.value for t in TaskType],
        "priority_modes": {
            PriorityMode.SPEED.value: "Lowest priority rank first",
            PriorityMode.COST.value: "Lowest combined token rate first",
            PriorityMode.QUALITY.value: "Highest priority rank first",
            PriorityMode.BALANCED.value: "Same ordering as speed (default)",
        },
    }


@router.get("/models", summary="List the model catalog")
async def list_models(
    model_router: ModelRouter = Depends(get_model_router),
) -> list[dict[str, Any]]:
    return [_model_summary(m) for m in model_router.get_available_models()]


@router.get("/health", summary="Per-model health status")
async def model_health(
    model_router: ModelRouter = Depends(get_model_router),
) -> list[dict[str, Any]]:
    return [
        {
            "provider": h.provider.value,
            "model": h.model,
            "is_healthy": h.is_healthy,
            "last_checked": h.last_checked.isoformat() if h.last_checked else None,
            "failure_count": h.failure_count,
            "success_rate": h.success_rate,
            "average_latency_ms": h.average_latency_ms,
            "rate_limit_hit": h.rate_limit_hit,
            "rate_limit_reset_at": (
                h.rate_limit_reset_at.isoformat() if h.rate_limit_reset_at else None
            ),
        }
        for h in model_router.get_health_status()
    ]


@router.get("/costs", summary="Accumulated cost analytics")
async def cost_analytics(
    model_router: ModelRouter = Depends(get_model_router),
) -> dict[str, Any]:
    return model_router.get_cost_analytics().to_dict()
