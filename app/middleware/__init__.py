"""
Middleware package for the property listing application.
Provides request validation and identity resolution.
"""

from .validation import ValidationMiddleware
from .auth import AuthResolverMiddleware

__all__ = [
    "ValidationMiddleware",
    "AuthResolverMiddleware",
]
