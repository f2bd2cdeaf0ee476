"""
Pydantic schemas for page view payloads.
"""

from pydantic import BaseModel
from typing import Optional
from app.schemas.user import UserResponse


class PageResponse(BaseModel):
    """View data for a rendered page."""

    title: str
    user: Optional[UserResponse] = None
    success: Optional[str] = None
    error: Optional[str] = None
