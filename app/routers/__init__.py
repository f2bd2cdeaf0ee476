"""
Route handlers for the property listing web app.
Provides organized routing for pages, authentication and listings.
"""

from .pages import router as pages_router
from .auth import router as auth_router
from .properties import router as properties_router

__all__ = ["pages_router", "auth_router", "properties_router"]
