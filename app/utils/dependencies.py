"""
FastAPI dependency injection utilities for identity, settings and services.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import Settings
from app.database import Database, get_db, get_database
from app.models.user import User
from app.services.auth import AuthService
from app.services.identity import Identity, Authenticated, ANONYMOUS
from app.services.property import PropertyTransactionManager
from app.services.session import SessionStore
from app.services.upload import UploadStaging
from app.utils.exceptions import LoginRequiredError


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        settings: Application settings, for the bcrypt work factor

    Returns:
        AuthService instance
    """
    return AuthService(db, bcrypt_rounds=settings.bcrypt_rounds)


async def get_session_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> SessionStore:
    """Get the session store bound to this request's database session."""
    return SessionStore(db, max_age=settings.session_max_age)


def get_property_manager(database: Database = Depends(get_database)) -> PropertyTransactionManager:
    """Get the property transaction manager for the application database."""
    return PropertyTransactionManager(database)


def get_upload_staging(settings: Settings = Depends(get_app_settings)) -> UploadStaging:
    """Get upload staging configured from settings."""
    return UploadStaging(
        settings.upload_dir,
        max_file_size=settings.max_file_size,
        allowed_types=settings.allowed_file_types
    )


def get_identity(request: Request) -> Identity:
    """
    Identity attached by the auth resolver middleware.
    Requests that bypassed the middleware are anonymous.
    """
    return getattr(request.state, "identity", ANONYMOUS)


def require_authenticated_user(identity: Identity = Depends(get_identity)) -> User:
    """
    Get the logged-in user for a protected action.

    Raises:
        LoginRequiredError: If the caller is anonymous
    """
    if not isinstance(identity, Authenticated):
        raise LoginRequiredError()
    return identity.user
