"""
Health check and performance monitoring endpoints.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Any, Dict

from app.config import settings
from app.database import check_database_connection, get_database_info
from app.middleware.performance import performance_metrics, system_snapshot
from app.models.user import User
from app.schemas.common import current_timestamp
from app.utils.dependencies import require_admin
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/")
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@router.get("/health")
async def health_check():
    """
    Health check with a database round trip.
    Used by container health checks and load balancers.
    """
    db_healthy = await check_database_connection()
    body = {
        "status": "healthy" if db_healthy else "unhealthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_healthy else "disconnected",
        "timestamp": current_timestamp(),
    }
    return JSONResponse(status_code=200 if db_healthy else 503, content=body)


@router.get("/health/db")
async def database_health_check():
    """Database connectivity with pool information."""
    db_healthy = await check_database_connection()
    if not db_healthy:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected"}
        )
    return {"status": "healthy", "database": "connected", **await get_database_info()}


@router.get("/metrics")
async def get_performance_metrics(
    slow_limit: int = Query(5, ge=1, le=50),
    current_user: User = Depends(require_admin("view dashboard"))
) -> Dict[str, Any]:
    """
    Request statistics per endpoint, the slowest recent requests and
    host and process resource usage.
    """
    return {
        "timestamp": current_timestamp(),
        "performance_summary": performance_metrics.summary(),
        "recent_slow_requests": performance_metrics.recent_slow_requests(limit=slow_limit),
        "slow_request_threshold": performance_metrics.slow_request_threshold,
        **system_snapshot(),
    }
