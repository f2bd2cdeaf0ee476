"""
Pydantic schemas for user data exposed to pages.
"""

from pydantic import BaseModel, ConfigDict
import uuid


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
