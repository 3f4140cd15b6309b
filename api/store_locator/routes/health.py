from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from store_locator.db.session import async_transaction
from store_locator.services.cache import get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _check_database() -> None:
    async with async_transaction() as session:
        result = await session.execute(text("SELECT 1"))
        result.scalar()


async def _check_redis() -> None:
    redis_client = await get_redis_client()
    await redis_client.ping()


async def _run_checks() -> Dict[str, str | None]:
    """Run each dependency check; map name -> error message, or None when it passed."""
    outcomes: Dict[str, str | None] = {}
    for name, check in (("database", _check_database), ("redis", _check_redis)):
        try:
            await check()
            outcomes[name] = None
        except Exception as e:
            logger.error("%s health check failed: %s", name.capitalize(), e)
            outcomes[name] = str(e)
    return outcomes


@router.get("/healthz")
async def healthcheck() -> dict[str, str]:
    """
    Basic liveness probe - returns OK if the application is running.
    """
    return {"status": "ok"}


@router.get("/health")
async def health() -> JSONResponse:
    """
    Health check that verifies the database and Redis.
    Returns 200 if all checks pass, 503 if any check fails.
    """
    outcomes = await _run_checks()
    checks: Dict[str, Any] = {}
    for name, error in outcomes.items():
        label = "Database" if name == "database" else "Redis"
        if error is None:
            checks[name] = {"status": "healthy", "message": f"{label} connection successful"}
        else:
            checks[name] = {"status": "unhealthy", "message": f"{label} connection failed: {error}"}

    healthy = all(error is None for error in outcomes.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks,
        },
    )


@router.get("/readiness")
async def readiness() -> JSONResponse:
    """
    Readiness probe - 200 when the service can answer store lookups, 503 otherwise.
    Redis is reported but not required: lookups fall back to the database.
    """
    outcomes = await _run_checks()
    ready = outcomes["database"] is None
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                name: {"status": "ready" if error is None else "not_ready"}
                for name, error in outcomes.items()
            },
        },
    )
