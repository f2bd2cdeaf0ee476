"""
Property repository for listing rows.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.repositories.base import BaseRepository
from app.models.property import Property
from typing import List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def add_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Insert a property inside the caller's transaction and return it with its id.
        The image collection starts empty so images can be attached without a lazy load.
        """
        return await self.add({**property_data, "images": []})

    async def list_by_owner(self, owner_id: uuid.UUID) -> List[Property]:
        """Get the properties listed by a user, newest first."""
        result = await self.db.execute(
            select(Property)
            .where(Property.owner_id == owner_id)
            .order_by(Property.created_at.desc())
        )
        return list(result.scalars().all())
