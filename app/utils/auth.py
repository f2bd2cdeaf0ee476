"""
Authentication utilities for password hashing and session cookie signing.
"""

import json
from functools import lru_cache
from typing import Optional
from jose import jws, JWSError
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool


SESSION_SIGNING_ALGORITHM = "HS256"


@lru_cache()
def get_password_context(rounds: int = 12) -> CryptContext:
    """
    Get the bcrypt hashing context for a work factor.
    One context is built per distinct ``rounds`` value.
    """
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds
    )


async def hash_password(password: str, pwd_context: CryptContext) -> str:
    """
    Hash password using bcrypt in a worker thread.

    Args:
        password: Plain text password
        pwd_context: Hashing context carrying the work factor

    Returns:
        Hashed password string
    """
    return await run_in_threadpool(pwd_context.hash, password)


async def verify_password(plain_password: str, hashed_password: str, pwd_context: CryptContext) -> bool:
    """
    Verify password against hash in a worker thread.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database
        pwd_context: Hashing context

    Returns:
        True if password matches, False otherwise
    """
    return await run_in_threadpool(pwd_context.verify, plain_password, hashed_password)


async def dummy_verify_password(pwd_context: CryptContext) -> None:
    """Spend the time of a real verification when there is no hash to check."""
    await run_in_threadpool(pwd_context.dummy_verify)


def sign_session_token(token: str, secret: str) -> str:
    """
    Sign a session token for use as a cookie value.

    Args:
        token: Opaque session token
        secret: Session secret

    Returns:
        Compact JWS carrying the token
    """
    return jws.sign({"sid": token}, secret, algorithm=SESSION_SIGNING_ALGORITHM)


def unsign_session_token(cookie_value: Optional[str], secret: str) -> Optional[str]:
    """
    Extract the session token from a signed cookie value.

    Args:
        cookie_value: Raw cookie value, possibly missing
        secret: Session secret

    Returns:
        Session token, or None if the cookie is missing, malformed or tampered with
    """
    if not cookie_value:
        return None

    try:
        payload = jws.verify(cookie_value, secret, algorithms=[SESSION_SIGNING_ALGORITHM])
        token = json.loads(payload).get("sid")
    except (JWSError, ValueError, AttributeError):
        return None

    return token if isinstance(token, str) and token else None
