"""Telemetry package: structured logging with request correlation."""

from __future__ import annotations

from src.telemetry.logging import (
    RequestIdMiddleware,
    bind_routing_context,
    clear_context,
    configure_logging,
)

__all__ = [
    "RequestIdMiddleware",
    "bind_routing_context",
    "clear_context",
    "configure_logging",
]
