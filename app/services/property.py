"""
Property creation service.
Inserts a property and its images atomically on a dedicated pooled connection.
"""

from typing import List
from app.database import Database
from app.models.property import Property
from app.repositories.property import PropertyRepository
from app.repositories.image import ImageRepository
from app.schemas.property import PropertyForm
from app.services.upload import StagedFile
from app.utils.exceptions import TransactionFailedError
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyTransactionManager:
    """
    Creates one property together with its image rows.

    Either the property and all of its images are committed, or none of
    them are. Staged files on disk are not part of the transaction.
    """

    def __init__(self, database: Database):
        self.database = database

    async def create_property(
        self,
        owner_id: uuid.UUID,
        form: PropertyForm,
        staged_files: List[StagedFile]
    ) -> Property:
        """
        Create a property listing with its images.

        Args:
            owner_id: ID of the authenticated user creating the listing
            form: Validated property fields
            staged_files: Uploads already written to disk, in received order

        Returns:
            Committed property with its images

        Raises:
            TransactionFailedError: If any insert or the commit fails; nothing is persisted
        """
        try:
            async with self.database.transaction() as db:
                property_obj = await PropertyRepository(db).add_property({
                    **form.model_dump(),
                    "owner_id": owner_id,
                })

                image_repo = ImageRepository(db)
                for position, staged in enumerate(staged_files):
                    await image_repo.add_image(property_obj, staged.stored_path, position)
        except Exception as e:
            # TODO: delete the staged files here; a rolled back listing currently leaves them orphaned in upload_dir.
            logger.error(
                f"Property creation rolled back for user {owner_id} "
                f"({len(staged_files)} staged files kept): {e}",
                exc_info=True
            )
            raise TransactionFailedError()

        logger.info(
            f"Property created by user {owner_id}: {property_obj.title} "
            f"(ID: {property_obj.id}, images: {property_obj.image_count})"
        )
        return property_obj
