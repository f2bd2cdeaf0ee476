"""
Signup and login endpoints.
Login issues a server-side session and hands the browser a signed, HTTP-only cookie.
"""

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse, RedirectResponse
from typing import Optional
from app.config import Settings
from app.schemas.auth import PageResponse
from app.services.auth import AuthService
from app.services.identity import Identity
from app.services.session import SessionStore
from app.routers.pages import page_user
from app.utils.auth import sign_session_token
from app.utils.dependencies import (
    get_auth_service,
    get_session_store,
    get_identity,
    get_app_settings
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.get(
    "/signup",
    response_model=PageResponse,
    summary="Signup page"
)
async def signup_page(identity: Identity = Depends(get_identity)) -> PageResponse:
    return PageResponse(title="Sign Up", user=page_user(identity))


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="Register a username, email and password. Does not log the user in."
)
async def signup(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    auth_service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    """
    Register a new user.

    Raises:
        MissingFieldsError: If any field is missing or empty
        ConflictError: If the username or email is already registered
        InfrastructureError: If the store fails
    """
    await auth_service.register_user(username, email, password)

    page = PageResponse(
        title="Sign Up",
        success="Account created successfully. You can now log in."
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=page.model_dump(exclude_none=True)
    )


@router.get(
    "/login",
    response_model=PageResponse,
    summary="Login page"
)
async def login_page(identity: Identity = Depends(get_identity)) -> PageResponse:
    return PageResponse(title="Login", user=page_user(identity))


@router.post(
    "/login",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Log in",
    description="Verify email and password, start a session and redirect home"
)
async def login(
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    auth_service: AuthService = Depends(get_auth_service),
    session_store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings)
) -> RedirectResponse:
    """
    Authenticate the user and set the session cookie.

    Raises:
        MissingFieldsError: If email or password is missing
        InvalidCredentialsError: If the email is unknown or the password is wrong
        InfrastructureError: If the store fails
    """
    user = await auth_service.authenticate_user(email, password)
    token = await session_store.create(user.id)

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_token(token, settings.session_secret),
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.is_production
    )
    return response
