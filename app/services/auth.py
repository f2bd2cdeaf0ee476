"""
Authentication service for signup and login.
Handles password hashing, credential verification and store failures.
"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository
from app.models.user import User
from app.utils.auth import (
    get_password_context,
    hash_password,
    verify_password,
    dummy_verify_password
)
from app.utils.exceptions import (
    MissingFieldsError,
    InvalidCredentialsError,
    ConflictError,
    InfrastructureError
)
import logging

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AuthService:
    """
    Authentication service for user registration and login.
    Signup and login are independent: registering does not open a session.
    """

    def __init__(self, db_session: AsyncSession, bcrypt_rounds: int = 12):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.pwd_context = get_password_context(bcrypt_rounds)

    async def register_user(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str]
    ) -> User:
        """
        Create a new user account.

        Args:
            username: Desired username
            email: Email address
            password: Plain text password, discarded once hashed

        Returns:
            Created User object

        Raises:
            MissingFieldsError: If any field is missing or empty
            ConflictError: If the username or email is already taken
            InfrastructureError: If the store fails
        """
        if _is_blank(username) or _is_blank(email) or not password:
            raise MissingFieldsError("All fields are required.")

        username = username.strip()
        email = email.strip()

        try:
            password_hash = await hash_password(password, self.pwd_context)
            user = await self.user_repo.create_user(username, email, password_hash)
        except IntegrityError:
            logger.info(f"Signup rejected, username or email already registered: {username}")
            raise ConflictError("Username or email already exists.")
        except Exception as e:
            logger.error(f"Signup error: {e}", exc_info=True)
            raise InfrastructureError()

        logger.info(f"User registered: {user.username} (ID: {user.id})")
        return user

    async def authenticate_user(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Verify an email and password pair.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            MissingFieldsError: If either field is missing or empty
            InvalidCredentialsError: If the email is unknown or the password is wrong
            InfrastructureError: If the store fails
        """
        if _is_blank(email) or not password:
            raise MissingFieldsError("Email and password are required.")

        email = email.strip()

        try:
            user = await self.user_repo.get_by_email(email)

            if user is None:
                await dummy_verify_password(self.pwd_context)
                password_ok = False
            else:
                password_ok = await verify_password(password, user.password_hash, self.pwd_context)
        except Exception as e:
            logger.error(f"Login error: {e}", exc_info=True)
            raise InfrastructureError()

        if not password_ok:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.username}")
        return user
