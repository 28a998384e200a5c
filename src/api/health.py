"""Health check endpoints.

/health/live   - Liveness probe: is the process up?
/health/ready  - Readiness probe: is at least one LLM provider configured?

These are public endpoints - no auth required.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.ai_router import ModelRouter
from src.api.dependencies import get_model_router

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict:
    """Liveness probe - always returns 200 if the process is running."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@router.get("/ready")
async def readiness(model_router: ModelRouter = Depends(get_model_router)) -> JSONResponse:
    """Readiness probe - 503 until some provider has a credential."""
    providers = [p.value for p in model_router.executor.configured_providers()]
    is_ready = bool(providers)
    return JSONResponse(
        status_code=200 if is_ready else 503,
        content={
            "status": "ready" if is_ready else "not_ready",
            "configured_providers": providers,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
