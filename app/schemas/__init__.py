"""
Pydantic schemas for form validation and page payloads.
"""

from app.schemas.user import UserResponse
from app.schemas.auth import PageResponse
from app.schemas.property import PropertyForm

__all__ = [
    "UserResponse",
    "PageResponse",
    "PropertyForm",
]
