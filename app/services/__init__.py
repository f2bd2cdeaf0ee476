"""
Service layer for business logic implementation.
Contains services for authentication, sessions, identity resolution, property creation, uploads and error handling.
"""

from .auth import AuthService
from .session import SessionStore
from .identity import resolve_identity, Anonymous, Authenticated, ANONYMOUS
from .property import PropertyTransactionManager
from .upload import UploadStaging, StagedFile
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "SessionStore",
    "resolve_identity",
    "Anonymous",
    "Authenticated",
    "ANONYMOUS",
    "PropertyTransactionManager",
    "UploadStaging",
    "StagedFile",
    "ErrorHandlerService"
]
