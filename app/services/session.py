"""
Session store: opaque tokens mapped to user ids with a fixed time-to-live.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.session import SessionRepository
import secrets
import uuid
import logging

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Server-side sessions kept in the ``sessions`` table.

    A session is created on login, read on every request and never updated.
    It expires ``max_age`` seconds after issuance; expired rows are ignored
    on read and purged when new sessions are issued.
    """

    def __init__(self, db_session: AsyncSession, max_age: int = 3600):
        self.db = db_session
        self.max_age = max_age
        self.repository = SessionRepository(db_session)

    @staticmethod
    def generate_token() -> str:
        """Return a new unguessable session token."""
        return secrets.token_urlsafe(32)

    async def create(self, user_id: uuid.UUID) -> str:
        """
        Issue a new session for a user.

        Args:
            user_id: ID of the authenticated user

        Returns:
            The new session token
        """
        now = datetime.now(timezone.utc)
        await self.repository.delete_expired(now)

        token = self.generate_token()
        await self.repository.create({
            "token": token,
            "user_id": user_id,
            "expires_at": now + timedelta(seconds=self.max_age),
        })
        logger.debug(f"Session issued for user {user_id}")
        return token

    async def get_user_id(self, token: str) -> Optional[uuid.UUID]:
        """
        Look up the user bound to a session token.

        Args:
            token: Session token from the cookie

        Returns:
            User id, or None when the token is unknown or expired
        """
        session = await self.repository.get_by_token(token)
        if session is None:
            return None

        if session.is_expired():
            logger.debug(f"Session for user {session.user_id} has expired")
            return None

        return session.user_id
