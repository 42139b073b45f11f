"""
API v1 Router - Main Entry Point
Aggregates all v1 endpoints for the communications portal
"""

from fastapi import APIRouter

from portal import __version__
from portal.api.v1.endpoints import (
    admin_approvals,
    admin_ministries,
    announcements,
    ministries,
)
from portal.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        503: {"description": "Service Unavailable"},
    }
)

router.include_router(announcements.router)
router.include_router(ministries.router)
router.include_router(admin_approvals.router)
router.include_router(admin_ministries.router)


@router.get("/health", tags=["System Health"])
def api_health_check():
    """Liveness check for the v1 API."""
    return {
        "status": "healthy",
        "version": __version__,
        "api_version": "v1",
        "total_routes": len(router.routes),
    }
