"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter

from cookdobby.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness check.

    A missing provider credential does not stop the process, but every
    generate call would fail with a configuration error, so it is reported
    here as ``degraded``.
    """
    configured = settings.provider_configured
    return {
        "status": "ready" if configured else "degraded",
        "provider_configured": configured,
    }
