"""
Request identity resolution.

Every request is resolved to either ``Anonymous`` or ``Authenticated(user)``.
Resolution never fails: any problem with the cookie, the session or the
store degrades to ``Anonymous`` so public pages keep working. Handlers that
need a user must check the variant themselves.
"""

from dataclasses import dataclass
from typing import Optional, Union
from app.database import Database
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.session import SessionStore
from app.utils.auth import unsign_session_token
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anonymous:
    """No authenticated user."""

    is_authenticated = False
    user = None


@dataclass(frozen=True)
class Authenticated:
    """A logged-in user, loaded from the credential store for this request."""

    user: User
    is_authenticated = True


Identity = Union[Anonymous, Authenticated]

ANONYMOUS = Anonymous()


async def resolve_identity(
    cookie_value: Optional[str],
    database: Database,
    secret: str,
    max_age: int = 3600
) -> Identity:
    """
    Resolve a session cookie to the identity of the caller.

    Args:
        cookie_value: Raw session cookie, possibly missing
        database: Database holding sessions and users
        secret: Secret the cookie was signed with
        max_age: Session lifetime in seconds

    Returns:
        Authenticated with the user record, or ANONYMOUS
    """
    token = unsign_session_token(cookie_value, secret)
    if token is None:
        return ANONYMOUS

    try:
        async with database.session() as db:
            user_id = await SessionStore(db, max_age=max_age).get_user_id(token)
            if user_id is None:
                return ANONYMOUS

            user = await UserRepository(db).get_by_id(user_id)
            if user is None:
                logger.info(f"Session refers to missing user {user_id}")
                return ANONYMOUS

            return Authenticated(user=user)
    except Exception as e:
        logger.error(f"Identity resolution failed: {e}", exc_info=True)
        return ANONYMOUS
