"""
FastAPI application entry point.
Builds the application, its database and its middleware stack.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
from typing import Optional
import logging

from app.config import Settings, get_settings
from app.database import Database
from app.routers import pages_router, auth_router, properties_router
from app.utils.exceptions import APIException, LoginRequiredError
from app.services.error_handler import ErrorHandlerService
from app.middleware import AuthResolverMiddleware, ValidationMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # Test database connection on startup
    db_connected = await database.ping()
    if not db_connected:
        logger.error("Failed to connect to database on startup")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings, read from the environment when omitted
        database: Database to use, built from settings when omitted

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    settings.check_secrets()
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        A small property listing site.

        * **Accounts**: signup and login with a session cookie
        * **Listings**: create a property with up to five photos in one transaction
        """,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Resolve identity on every request; runs inside the validation middleware
    app.add_middleware(
        AuthResolverMiddleware,
        cookie_name=settings.session_cookie_name
    )

    # Add validation middleware
    app.add_middleware(
        ValidationMiddleware,
        max_request_size=settings.max_request_size,
        enable_request_logging=settings.debug
    )

    # Include routers
    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(properties_router)

    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    register_exception_handlers(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Global exception handlers using ErrorHandlerService."""

    @app.exception_handler(LoginRequiredError)
    async def login_required_handler(request: Request, exc: LoginRequiredError):
        """Redirect anonymous callers of protected actions to the login page."""
        return ErrorHandlerService.handle_login_required(exc, request)

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        """Handle custom API exceptions with structured error responses."""
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI request validation errors with detailed field information."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
        """Handle Pydantic validation errors with detailed field information."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors without exposing driver details."""
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle FastAPI HTTP exceptions with structured error responses."""
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with secure error responses."""
        return ErrorHandlerService.handle_unexpected_error(exc, request)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
