"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, lifespan
events for database initialization and coordinator wiring, and the v1 API
router.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response

from src.app.agents.coordinator import MultiAgentCoordinator
from src.app.agents.registry import build_agent_registry
from src.app.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.app.api.v1.router import router as v1_router
from src.app.campus.repository import CampusRepository
from src.app.config import get_settings
from src.app.core.database import close_db, get_session, init_db
from src.app.core.monitoring import MetricsMiddleware, get_metrics_response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init DB and the coordinator on startup, close on shutdown."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()

    # Table creation is failure-tolerant: agents turn database errors into
    # failure results, so the app can still start and report degraded health.
    try:
        await init_db()
        log.info("database_initialized")
    except Exception:
        log.warning("database_init_failed", exc_info=True)

    try:
        repository = CampusRepository(session_factory=get_session)
        registry = build_agent_registry(repository)
        app.state.campus_repository = repository
        app.state.coordinator = MultiAgentCoordinator(
            registry,
            agent_timeout=settings.AGENT_TIMEOUT_SECONDS,
            metrics_window=settings.PERFORMANCE_WINDOW,
        )
        log.info("coordinator_initialized", agents=registry.names())
    except Exception:
        log.error("coordinator_init_failed", exc_info=True)
        app.state.coordinator = None

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Campus Assistant API",
        version="0.1.0",
        description="Campus assistant backed by a multi-agent query coordinator",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # CORS middleware
    if settings.CORS_ALLOWED_ORIGINS == "*":
        origins = ["*"]
    else:
        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    # Include v1 API router (health, assistant)
    app.include_router(v1_router)

    # Prometheus metrics endpoint (infrastructure route, outside v1 router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
