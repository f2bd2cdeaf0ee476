"""
Session repository for the server-side session table.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete
from app.repositories.base import BaseRepository
from app.models.session import UserSession
from datetime import datetime
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class SessionRepository(BaseRepository[UserSession]):
    """Repository for login sessions."""

    def __init__(self, db: AsyncSession):
        super().__init__(UserSession, db)

    async def get_by_token(self, token: str) -> Optional[UserSession]:
        return await self.get_by_field("token", token)

    async def delete_expired(self, now: datetime) -> int:
        """
        Remove every session whose expiry has passed.

        Returns:
            Number of sessions removed
        """
        try:
            result = await self.db.execute(delete(UserSession).where(UserSession.expires_at <= now))
            await self.db.commit()
            if result.rowcount:
                logger.debug(f"Purged {result.rowcount} expired sessions")
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to purge expired sessions: {e}")
            raise
