"""
Health check API endpoints.
Provides system health status and readiness checks.
"""

import logging
from typing import Any

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.dependencies import CallRecordStoreDep


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and application version
    """
    return {
        "status": "healthy",
        "version": settings.app_version,
        "app_name": settings.app_name,
    }


@router.get("/ready")
async def readiness_check(store: CallRecordStoreDep) -> dict[str, Any]:
    """
    Readiness check endpoint.
    Verifies that the database is reachable and reports how much data it holds.

    Returns:
        dict: Readiness status with dependency checks
    """
    checks: dict[str, Any] = {"database": "unknown"}

    try:
        checks["subscribers"] = await store.count_subscribers()
        checks["records"] = await store.count_records()
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")
        checks["database"] = f"unhealthy: {e}"

    return {
        "status": "ready" if checks["database"] == "healthy" else "not_ready",
        "checks": checks,
        "version": settings.app_version,
    }
