"""
Repository layer for data access operations.
"""

from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository
from app.repositories.session import SessionRepository
from app.repositories.property import PropertyRepository
from app.repositories.image import ImageRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SessionRepository",
    "PropertyRepository",
    "ImageRepository",
]
