"""FastAPI dependencies shared by API routers."""

from __future__ import annotations

from fastapi import Request

from src.ai_router import ModelRouter


def get_model_router(request: Request) -> ModelRouter:
    """Return the ModelRouter instance owned by the running application."""
    return request.app.state.model_router
