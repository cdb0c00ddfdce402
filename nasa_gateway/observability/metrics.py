from __future__ import annotations

import time
from collections.abc import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_COUNTER = Counter(
    "nasa_gateway_request_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "nasa_gateway_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
)
UPSTREAM_FAILURES = Counter(
    "nasa_gateway_upstream_failures_total",
    "Failed calls to the NASA API",
    ["endpoint", "reason"],
)
AUTH_DECISIONS = Counter(
    "nasa_gateway_auth_decisions_total",
    "Authorization outcomes at the routing layer",
    ["outcome"],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        route = request.scope.get("route")
        # Raw paths carry ids; fall back to a fixed label to bound cardinality
        path_template = getattr(route, "path", "unmatched")
        REQUEST_COUNTER.labels(
            request.method, path_template, response.status_code
        ).inc()
        REQUEST_LATENCY.labels(request.method, path_template).observe(duration)
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
