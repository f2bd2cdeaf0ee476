"""
Database models for the property listing application.
Includes User, UserSession, Property and PropertyImage models.
"""

from app.models.user import User
from app.models.session import UserSession
from app.models.property import Property, PropertyType, ListingType
from app.models.image import PropertyImage

# Export all models for easy importing
__all__ = [
    "User",
    "UserSession",
    "Property",
    "PropertyType",
    "ListingType",
    "PropertyImage",
]
