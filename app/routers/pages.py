"""
Public page endpoints and the health check.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.config import Settings
from app.database import Database, get_database
from app.schemas.auth import PageResponse
from app.schemas.user import UserResponse
from app.services.identity import Identity, Authenticated
from app.utils.dependencies import get_identity, get_app_settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


def page_user(identity: Identity) -> Optional[UserResponse]:
    """Public view of the caller for page payloads, None when anonymous."""
    if isinstance(identity, Authenticated):
        return UserResponse.model_validate(identity.user)
    return None


@router.get(
    "/",
    response_model=PageResponse,
    summary="Home page"
)
async def home(identity: Identity = Depends(get_identity)) -> PageResponse:
    """Home page, shown to anonymous and logged-in visitors alike."""
    return PageResponse(title="Home", user=page_user(identity))


@router.get("/health", tags=["Health"])
async def health_check(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings)
):
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    db_healthy = await database.ping()

    if not db_healthy:
        logger.error("Health check failed: database unreachable")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed"
        )

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected",
        "pool": database.pool_status()
    }
