"""
Auth resolver middleware.
Attaches the caller's identity to every request without ever rejecting one.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging

from app.services.identity import resolve_identity

logger = logging.getLogger(__name__)


class AuthResolverMiddleware(BaseHTTPMiddleware):
    """
    Resolves the session cookie to ``request.state.identity``.

    The identity is ``Authenticated(user)`` or ``ANONYMOUS``; resolution
    failures degrade to anonymous. Access control is left to the handlers.
    """

    def __init__(self, app: ASGIApp, cookie_name: str = "sid"):
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = request.app.state.settings
        identity = await resolve_identity(
            request.cookies.get(self.cookie_name),
            request.app.state.database,
            secret=settings.session_secret,
            max_age=settings.session_max_age
        )
        request.state.identity = identity
        return await call_next(request)
