"""
Image repository for property photo rows.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.base import BaseRepository
from app.models.image import PropertyImage
from app.models.property import Property


class ImageRepository(BaseRepository[PropertyImage]):
    """Repository for property images."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyImage, db)

    async def add_image(self, property_obj: Property, image_url: str, position: int) -> PropertyImage:
        """
        Insert one image row for a property inside the caller's transaction.

        Args:
            property_obj: Property the image belongs to (already flushed)
            image_url: Stored path returned by upload staging
            position: Zero-based upload order
        """
        return await self.add({
            "property_rel": property_obj,
            "property_id": property_obj.id,
            "image_url": image_url,
            "position": position,
        })
