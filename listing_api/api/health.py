"""Health check and probe endpoints."""

import time
from typing import Any, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from listing_api.catalog import LISTINGS
from listing_api.core.config import settings
from listing_api.core.db_client import db
from listing_api.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])

STARTED_AT = time.time()


@router.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "running",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/health",
        "listings": sorted(f"{settings.API_V1_STR}/{name}" for name in LISTINGS),
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint with database connectivity verification.

    Returns 200 if healthy, 503 if the database is unavailable.
    """
    if not settings.DATABASE_ENABLED:
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": "disabled",
        }

    db_available = await db.test_connection(timeout=5.0)

    if not db_available:
        logger.warning("Health check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": time.time(),
                "version": settings.VERSION,
                "database": "unavailable",
            },
        )

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected",
    }


@router.get("/status")
async def detailed_status() -> Dict[str, Any]:
    """Detailed status with database pool and search configuration."""
    db_available = await db.test_connection(timeout=5.0) if settings.DATABASE_ENABLED else False

    return {
        "application": {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "status": "healthy" if db_available else "degraded",
            "uptime_seconds": round(time.time() - STARTED_AT, 1),
        },
        "services": {
            "database": {
                "status": "connected" if db_available else "unavailable",
                "enabled": settings.DATABASE_ENABLED,
                "pool_stats": db.get_pool_stats(),
            },
        },
        "search": {
            "default_limit": settings.SEARCH_DEFAULT_LIMIT,
            "max_limit": settings.SEARCH_MAX_LIMIT,
            "concurrent_reads": settings.SEARCH_CONCURRENT_READS,
            "listings": sorted(LISTINGS),
        },
        "configuration": {
            "api_prefix": settings.API_V1_STR,
            "log_level": settings.LOG_LEVEL,
            "log_format": settings.LOG_FORMAT,
        },
        "timestamp": time.time(),
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """Readiness probe endpoint for Kubernetes."""
    if settings.DATABASE_ENABLED and not await db.test_connection(timeout=5.0):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "ready": False,
                "reason": "Database not ready",
                "timestamp": time.time(),
            },
        )

    return {"ready": True, "timestamp": time.time()}


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """Liveness probe endpoint for Kubernetes."""
    return {"alive": True, "timestamp": time.time()}
