"""Prometheus metrics for HTTP traffic and multi-agent coordination.

Provides:
- MetricsMiddleware: ASGI middleware for HTTP request metrics
- Coordinator and agent counters/histograms updated by the coordinator
- track_agent_invocation(): Context manager for agent call metrics
- get_metrics_response(): Response for the /metrics route
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── HTTP Metrics ─────────────────────────────────────────────────────────────

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ── Coordinator Metrics ──────────────────────────────────────────────────────

coordinator_queries_total = Counter(
    "coordinator_queries_total",
    "Total queries handled by the multi-agent coordinator",
    ["strategy"],
)

coordinator_query_duration_seconds = Histogram(
    "coordinator_query_duration_seconds",
    "Coordinator wall-clock time per query in seconds",
    ["strategy"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

agent_invocations_total = Counter(
    "agent_invocations_total",
    "Total agent process() invocations",
    ["agent", "status"],
)

agent_invocation_duration_seconds = Histogram(
    "agent_invocation_duration_seconds",
    "Agent process() duration in seconds",
    ["agent"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

agent_scoring_failures_total = Counter(
    "agent_scoring_failures_total",
    "can_handle() calls that raised and were scored as 0",
    ["agent"],
)


# ── Metrics Middleware ───────────────────────────────────────────────────────


class MetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that records Prometheus metrics for every HTTP request.

    Requests are labelled by route template (e.g. ``/assistant/query``) when
    one matched, else by raw path. The /metrics endpoint itself is skipped.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # Route template once routing has run, so labels stay bounded.
        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or request.url.path

        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=str(response.status_code),
        ).inc()

        http_request_duration_seconds.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        return response


# ── Agent Metrics Helper ─────────────────────────────────────────────────────


@asynccontextmanager
async def track_agent_invocation(agent: str) -> AsyncGenerator[None, None]:
    """Context manager that records count and duration of one agent call.

    Usage:
        async with track_agent_invocation("dining"):
            result = await agent.process(query)

    The call is counted as "error" if the block raises, "success" otherwise.
    Exceptions are re-raised unchanged.
    """
    start_time = time.perf_counter()
    status = "success"

    try:
        yield
    except BaseException:
        status = "error"
        raise
    finally:
        agent_invocations_total.labels(agent=agent, status=status).inc()
        agent_invocation_duration_seconds.labels(agent=agent).observe(
            time.perf_counter() - start_time
        )


def record_coordinator_query(strategy: str, total_time_ms: int) -> None:
    """Record one completed coordinator query."""
    coordinator_queries_total.labels(strategy=strategy).inc()
    coordinator_query_duration_seconds.labels(strategy=strategy).observe(total_time_ms / 1000)


# ── Metrics Endpoint ─────────────────────────────────────────────────────────


def get_metrics_response() -> Response:
    """Generate Prometheus exposition format response."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
