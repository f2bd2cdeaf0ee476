"""
Tests for the transactional property creation flow.
"""

import asyncio
import pytest
from decimal import Decimal
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Database
from app.models.property import PropertyType, ListingType
from app.models.user import User
from app.repositories.image import ImageRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.schemas.property import PropertyForm
from app.services.property import PropertyTransactionManager
from app.services.upload import StagedFile
from app.utils.exceptions import TransactionFailedError, ValidationError


def listing_form(**overrides) -> PropertyForm:
    data = {
        "title": "Sunny flat",
        "description": "Two rooms near the park",
        "price": "100000",
        "area_sqm": "50",
        "property_type": "apartment",
        "location_city": "Metropolis",
        "listing_type": "sale",
    }
    data.update(overrides)
    return PropertyForm.from_form(data)


def staged(count: int):
    return [
        StagedFile(
            original_filename=f"photo{i}.png",
            stored_path=f"/uploads/{i:032x}.png",
            file_size=100,
        )
        for i in range(count)
    ]


async def count_rows(database: Database):
    async with database.session() as db:
        return (
            await PropertyRepository(db).count(),
            await ImageRepository(db).count(),
        )


class TestPropertyForm:
    """Test validation of the add-property form."""

    def test_valid_form(self):
        form = listing_form()
        assert form.price == Decimal("100000")
        assert form.area_sqm == Decimal("50")
        assert form.property_type is PropertyType.APARTMENT
        assert form.listing_type is ListingType.SALE

    def test_values_are_stripped(self):
        assert listing_form(title="  Loft  ").title == "Loft"

    @pytest.mark.parametrize("field", [
        "title", "description", "price", "area_sqm",
        "property_type", "location_city", "listing_type",
    ])
    def test_each_field_is_required(self, field):
        with pytest.raises(ValidationError) as exc_info:
            listing_form(**{field: ""})

        assert exc_info.value.status_code == 400
        assert [error["field"] for error in exc_info.value.field_errors] == [field]

    @pytest.mark.parametrize("field,value", [
        ("price", "-1"),
        ("price", "lots"),
        ("price", "NaN"),
        ("area_sqm", "-0.5"),
        ("area_sqm", "inf"),
        ("property_type", "castle"),
        ("listing_type", "lease"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            listing_form(**{field: value})

    def test_zero_is_allowed(self):
        form = listing_form(price="0", area_sqm="0")
        assert form.price == 0
        assert form.area_sqm == 0


class TestPropertyTransactionManager:
    """Test that a property and its images are committed together or not at all."""

    @pytest.mark.asyncio
    async def test_creates_property_with_images_in_order(self, database: Database, test_user: User):
        files = staged(2)

        created = await PropertyTransactionManager(database).create_property(
            test_user.id, listing_form(), files
        )

        async with database.session() as db:
            stored = await PropertyRepository(db).get_by_id(created.id)

        assert stored is not None
        assert stored.owner_id == test_user.id
        assert stored.title == "Sunny flat"
        assert stored.location_city == "Metropolis"
        assert [image.image_url for image in stored.images] == [f.stored_path for f in files]
        assert [image.position for image in stored.images] == [0, 1]
        assert all(image.property_id == created.id for image in stored.images)

    @pytest.mark.asyncio
    async def test_serialized_listing(self, database: Database, test_user: User):
        created = await PropertyTransactionManager(database).create_property(
            test_user.id, listing_form(), staged(1)
        )

        assert created.image_count == 1

        async with database.session() as db:
            stored = await PropertyRepository(db).get_by_id(created.id)

        data = stored.to_dict(include_images=True)
        assert data["owner_id"] == str(test_user.id)
        assert data["price"] == 100000.0
        assert data["property_type"] == "apartment"
        assert data["listing_type"] == "sale"
        assert data["images"] == [{
            "id": str(stored.images[0].id),
            "property_id": str(created.id),
            "image_url": staged(1)[0].stored_path,
            "position": 0,
        }]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 1, 5])
    async def test_image_row_count_matches_staged_files(self, database: Database, test_user: User, count):
        await PropertyTransactionManager(database).create_property(
            test_user.id, listing_form(), staged(count)
        )

        assert await count_rows(database) == (1, count)

    @pytest.mark.asyncio
    async def test_image_failure_rolls_back_everything(
        self, database: Database, test_user: User, monkeypatch
    ):
        original_add_image = ImageRepository.add_image
        calls = []

        async def failing_add_image(self, property_obj, image_url, position):
            calls.append(position)
            if position == 1:
                raise RuntimeError("disk quota exceeded")
            return await original_add_image(self, property_obj, image_url, position)

        monkeypatch.setattr(ImageRepository, "add_image", failing_add_image)

        with pytest.raises(TransactionFailedError) as exc_info:
            await PropertyTransactionManager(database).create_property(
                test_user.id, listing_form(), staged(3)
            )

        assert calls == [0, 1]
        assert exc_info.value.status_code == 500
        assert "disk quota" not in exc_info.value.detail
        assert await count_rows(database) == (0, 0)
        assert database.pool_status()["checked_out_connections"] == 0

    @pytest.mark.asyncio
    async def test_property_failure_inserts_nothing(
        self, database: Database, test_user: User, monkeypatch
    ):
        async def failing_add_property(self, property_data):
            raise RuntimeError("deadlock detected")

        monkeypatch.setattr(PropertyRepository, "add_property", failing_add_property)

        with pytest.raises(TransactionFailedError):
            await PropertyTransactionManager(database).create_property(
                test_user.id, listing_form(), staged(2)
            )

        assert await count_rows(database) == (0, 0)

    @pytest.mark.asyncio
    async def test_connections_are_released(self, database: Database, test_user: User):
        manager = PropertyTransactionManager(database)
        for _ in range(database.pool_size + 2):
            await manager.create_property(test_user.id, listing_form(), staged(1))

        assert database.pool_status()["checked_out_connections"] == 0
        assert await count_rows(database) == (database.pool_size + 2, database.pool_size + 2)


class TestDatabaseTransaction:
    """Test the transaction scope itself."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, database: Database, test_user: User):
        async with database.transaction() as db:
            await PropertyRepository(db).add_property({
                **listing_form().model_dump(),
                "owner_id": test_user.id,
            })

        assert await count_rows(database) == (1, 0)

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, database: Database, test_user: User):
        with pytest.raises(ValueError):
            async with database.transaction() as db:
                await PropertyRepository(db).add_property({
                    **listing_form().model_dump(),
                    "owner_id": test_user.id,
                })
                raise ValueError("boom")

        assert await count_rows(database) == (0, 0)

    @pytest.mark.asyncio
    async def test_rollback_failure_keeps_original_error(self, database: Database, monkeypatch):
        async def failing_rollback(self):
            raise RuntimeError("rollback failed")

        monkeypatch.setattr(AsyncSession, "rollback", failing_rollback)

        with pytest.raises(ValueError, match="original"):
            async with database.transaction():
                raise ValueError("original")

        assert database.pool_status()["checked_out_connections"] == 0


    @pytest.mark.asyncio
    async def test_exhausted_pool_waits_for_release(self, settings):
        database = Database(settings.sqlalchemy_url, pool_size=1)
        await database.create_tables()
        held = asyncio.Event()
        release = asyncio.Event()

        async def first():
            async with database.transaction() as db:
                # begin() is lazy; a statement checks the connection out
                await db.execute(text("SELECT 1"))
                held.set()
                await release.wait()

        async def second():
            await held.wait()
            async with database.transaction() as db:
                await UserRepository(db).add({
                    "username": "queued",
                    "email": "queued@example.com",
                    "password_hash": "x",
                })

        try:
            first_task = asyncio.create_task(first())
            second_task = asyncio.create_task(second())

            await held.wait()
            await asyncio.sleep(0.2)
            assert not second_task.done()
            assert database.pool_status()["checked_out_connections"] == 1

            release.set()
            await asyncio.wait_for(asyncio.gather(first_task, second_task), timeout=5)

            async with database.session() as db:
                assert await UserRepository(db).count() == 1
            assert database.pool_status()["checked_out_connections"] == 0
        finally:
            await database.dispose()
