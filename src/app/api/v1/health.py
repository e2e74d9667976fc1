"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready) checks. Readiness
verifies the campus database and that the coordinator was wired at startup.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.app.config import get_settings
from src.app.core.database import check_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check.

    No external dependencies are checked -- just that the server is running.
    """
    settings = get_settings()
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


async def _check_dependencies(request: Request) -> dict:
    """Check database connectivity and coordinator wiring. Returns check results dict."""
    checks: dict = {"database": "ok", "coordinator": "ok"}

    try:
        await check_db()
    except Exception as e:
        checks["database"] = "error"
        checks["database_error"] = str(e)

    if getattr(request.app.state, "coordinator", None) is None:
        checks["coordinator"] = "not_initialized"

    return checks


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check: verifies database connectivity and coordinator wiring.

    Returns 200 if all pass, 503 if any dependency fails.
    """
    checks = await _check_dependencies(request)
    all_healthy = checks.get("database") == "ok" and checks.get("coordinator") == "ok"

    return JSONResponse(
        status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_healthy else "degraded",
            "checks": checks,
        },
    )
