"""Logging and metrics wiring."""

from __future__ import annotations

from nasa_gateway.observability.logging import configure_logging
from nasa_gateway.observability.metrics import MetricsMiddleware, metrics_response

__all__ = [
    "MetricsMiddleware",
    "configure_logging",
    "metrics_response",
]
