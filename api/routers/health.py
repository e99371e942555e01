# WORKFLOW: Health check endpoints for monitoring and operational status.
# Used by: Load balancers, monitoring systems, container orchestrators
# Endpoints:
# 1. /healthz - Basic health check (always returns healthy)
# 2. /readyz - Readiness check that pings the price store
# 3. /livez - Liveness check for Kubernetes probes
#
# Readiness flow: Readiness check -> PriceStore.ping() -> Ready/Not ready (503)

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.config import settings
from db.gateway import PriceStore
from db.session import get_price_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/healthz")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Health status of the API
    """
    return {
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.version,
        "environment": settings.environment
    }


@router.get("/readyz")
def readiness_check(store: PriceStore = Depends(get_price_store)):
    """
    Readiness check endpoint.

    The service is ready once the price store answers a ping.

    Returns:
        Readiness status with detailed checks
    """
    checks = {"database": store.ping()}
    is_ready = all(checks.values())
    if not is_ready:
        logger.warning(f"Readiness check failed: {checks}")

    return JSONResponse(
        status_code=200 if is_ready else 503,
        content={
            "status": "ready" if is_ready else "not_ready",
            "timestamp": _now(),
            "checks": checks,
            "version": settings.version
        },
    )


@router.get("/livez")
async def liveness_check():
    """Liveness check used by Kubernetes probes."""
    return {
        "status": "alive",
        "timestamp": _now()
    }
