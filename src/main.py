"""FastAPI application entrypoint.

Application startup order:
1. Load settings (from environment)
2. Build the model router (catalog, provider adapters, trackers)
3. Register middleware (CORS, request id)
4. Include all routers

Shutdown order:
1. Close provider HTTP clients
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.ai_router import ModelRouter, create_model_router
from src.api.router import api_v1_router, public_router
from src.config import Settings, get_settings
from src.telemetry.logging import RequestIdMiddleware, configure_logging

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    settings: Settings = app.state.settings

    log.info(
        "app.starting",
        environment=settings.environment,
        configured_providers=[
            p.value for p in app.state.model_router.executor.configured_providers()
        ],
    )
    log.info("app.ready")
    yield

    await app.state.model_router.aclose()
    log.info("app.shutdown")


def create_app(
    settings: Settings | None = None,
    model_router: ModelRouter | None = None,
) -> FastAPI:
    """Application factory.

    Args:
        settings: Optional settings. If None, loaded from the environment.
        model_router: Optional pre-built router (tests inject fakes here).
    """
    settings = settings or get_settings()

    # Configure structured logging first (before any log calls)
    configure_logging(
        json_logs=settings.is_prod,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )

    app = FastAPI(
        title="Payroll AI Router",
        description=(
            "Multi-provider LLM routing with task-aware model selection, "
            "automatic fallback, health and cost tracking."
        ),
        version="0.1.0",
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
        openapi_url="/openapi.json" if settings.is_dev else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.model_router = model_router or create_model_router(settings)

    # ------------------------------------------------------------------ #
    # Middleware (added in reverse order - last added = first executed)
    # ------------------------------------------------------------------ #

    # In dev mode, allow all origins for easier development
    cors_origins = ["*"] if settings.is_dev else settings.cors_allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.is_prod,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Unique request ID for log correlation
    app.add_middleware(RequestIdMiddleware)

    # ------------------------------------------------------------------ #
    # Routers
    # ------------------------------------------------------------------ #
    app.include_router(public_router)
    app.include_router(api_v1_router)

    # ------------------------------------------------------------------ #
    # Global exception handlers
    # ------------------------------------------------------------------ #

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log.error(
            "app.unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


# Module-level app instance for uvicorn
app = create_app()
