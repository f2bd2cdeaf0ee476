"""
Utility modules for the property listing application.
"""

from .auth import (
    get_password_context,
    hash_password,
    verify_password,
    sign_session_token,
    unsign_session_token,
)

from .exceptions import (
    APIException,
    ValidationError,
    MissingFieldsError,
    UnauthorizedError,
    InvalidCredentialsError,
    LoginRequiredError,
    ConflictError,
    InfrastructureError,
    TransactionFailedError,
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "get_password_context",
    "hash_password",
    "verify_password",
    "sign_session_token",
    "unsign_session_token",

    # Exceptions
    "APIException",
    "ValidationError",
    "MissingFieldsError",
    "UnauthorizedError",
    "InvalidCredentialsError",
    "LoginRequiredError",
    "ConflictError",
    "InfrastructureError",
    "TransactionFailedError",
]
