"""
Tests for photo upload staging.
"""

import io
from pathlib import Path
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.services.upload import UploadStaging
from app.utils.exceptions import (
    FileUploadError,
    FileSizeExceededError,
    UnsupportedFileTypeError
)


def upload(content: bytes, filename: str = "photo.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def staging(tmp_path) -> UploadStaging:
    return UploadStaging(str(tmp_path / "uploads"), max_file_size=1024 * 1024)


class TestUploadStaging:
    """Test validation and storage of uploaded photos."""

    @pytest.mark.asyncio
    async def test_stage_writes_file(self, staging: UploadStaging, make_image):
        content = make_image("PNG")

        [staged] = await staging.stage([upload(content)])

        assert staged.original_filename == "photo.png"
        assert staged.file_size == len(content)
        assert staged.stored_path.startswith("/uploads/")
        assert staged.stored_path.endswith(".png")
        stored_file = staging.upload_dir / Path(staged.stored_path).name
        assert stored_file.read_bytes() == content

    @pytest.mark.asyncio
    async def test_stage_keeps_order_and_unique_names(self, staging: UploadStaging, make_image):
        files = [
            upload(make_image("PNG"), "a.png", "image/png"),
            upload(make_image("JPEG"), "b.JPG", "image/jpeg"),
            upload(make_image("PNG"), "a.png", "image/png"),
        ]

        staged = await staging.stage(files)

        assert [s.original_filename for s in staged] == ["a.png", "b.JPG", "a.png"]
        assert staged[1].stored_path.endswith(".jpg")
        assert len({s.stored_path for s in staged}) == 3

    @pytest.mark.asyncio
    async def test_stage_nothing(self, staging: UploadStaging):
        assert await staging.stage([]) == []
        assert list(staging.upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unsupported_type(self, staging: UploadStaging):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            await staging.stage([upload(b"hello", "notes.txt", "text/plain")])

        assert exc_info.value.status_code == 400
        assert list(staging.upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_extension_must_match_type(self, staging: UploadStaging, make_image):
        with pytest.raises(FileUploadError):
            await staging.stage([upload(make_image("PNG"), "photo.gif", "image/png")])

    @pytest.mark.asyncio
    async def test_content_must_be_an_image(self, staging: UploadStaging):
        with pytest.raises(FileUploadError):
            await staging.stage([upload(b"definitely not a png", "photo.png", "image/png")])

    @pytest.mark.asyncio
    async def test_content_must_match_declared_type(self, staging: UploadStaging, make_image):
        with pytest.raises(FileUploadError):
            await staging.stage([upload(make_image("JPEG"), "photo.png", "image/png")])

    @pytest.mark.asyncio
    async def test_empty_file(self, staging: UploadStaging):
        with pytest.raises(FileUploadError):
            await staging.stage([upload(b"")])

    @pytest.mark.asyncio
    async def test_file_too_large(self, tmp_path, make_image):
        content = make_image("PNG")
        small = UploadStaging(str(tmp_path / "small"), max_file_size=len(content) - 1)

        with pytest.raises(FileSizeExceededError):
            await small.stage([upload(content)])

    @pytest.mark.asyncio
    async def test_invalid_file_prevents_any_write(self, staging: UploadStaging, make_image):
        files = [
            upload(make_image("PNG"), "good.png"),
            upload(b"broken", "bad.png"),
        ]

        with pytest.raises(FileUploadError):
            await staging.stage(files)

        assert list(staging.upload_dir.iterdir()) == []

    def test_selected_files_drops_empty_parts(self):
        chosen = upload(b"x", "a.png")
        blank = upload(b"", "")

        assert UploadStaging.selected_files([chosen, blank, None]) == [chosen]
        assert UploadStaging.selected_files(None) == []

    def test_upload_dir_is_created(self, tmp_path):
        target = tmp_path / "nested" / "uploads"
        UploadStaging(str(target))
        assert target.is_dir()
