"""
User repository for the credential store.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.repositories.base import BaseRepository
from app.models.user import User
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user row.
        Uniqueness of username and email is left to the database constraints,
        so concurrent signups cannot both succeed.

        Raises:
            IntegrityError: If the username or email is already taken
        """
        user = await self.create({
            "username": username,
            "email": email,
            "password_hash": password_hash,
        })
        logger.info(f"Created user: {user.username} (ID: {user.id})")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get at most one user by exact email match.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        result = await self.db.execute(select(User).where(User.email == email).limit(1))
        return result.scalar_one_or_none()
