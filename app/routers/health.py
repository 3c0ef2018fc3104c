# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.dependencies import ConnectionsDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    cache: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(connections: ConnectionsDep):
    """
    Readiness check endpoint.

    Pings MongoDB and Redis. "degraded" means the server is up but at
    least one dependency isn't answering (sessions are off if it's Redis).
    """
    checks = ChecksResponse(database="unknown", cache="unknown")

    # Check database
    try:
        await connections.database.ping()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: database ping failed: {e}")
        checks.database = f"unhealthy: {str(e)[:50]}"

    # Check cache
    if connections.cache is None:
        checks.cache = "unavailable"
    else:
        try:
            await connections.cache.ping()
            checks.cache = "healthy"
        except Exception as e:
            logger.warning(f"Readiness: cache ping failed: {e}")
            checks.cache = f"unhealthy: {str(e)[:50]}"

    all_healthy = checks.database == "healthy" and checks.cache == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )
