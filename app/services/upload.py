"""
Upload staging for property photos.
Validates uploaded images and writes them to the upload directory under collision-resistant names.
"""

import io
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from app.utils.exceptions import (
    FileUploadError,
    FileSizeExceededError,
    UnsupportedFileTypeError
)
import logging

logger = logging.getLogger(__name__)

# Supported image formats and their file extensions
SUPPORTED_FORMATS = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
    "image/webp": [".webp"],
}

# Pillow format names per MIME type
PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}

PUBLIC_PREFIX = "/uploads"


@dataclass(frozen=True)
class StagedFile:
    """An upload already written to durable storage."""

    original_filename: str
    stored_path: str
    file_size: int


class UploadStaging:
    """Writes uploaded images to ``upload_dir`` before the database work runs."""

    def __init__(
        self,
        upload_dir: str,
        max_file_size: int = 10 * 1024 * 1024,
        allowed_types: Optional[List[str]] = None
    ):
        self.upload_dir = Path(upload_dir)
        self.max_file_size = max_file_size
        self.allowed_types = allowed_types or list(SUPPORTED_FORMATS)

        # Ensure upload directory exists
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def selected_files(files: Optional[List[UploadFile]]) -> List[UploadFile]:
        """Drop the empty parts browsers send for file inputs left blank."""
        return [f for f in files or [] if f is not None and f.filename]

    def validate_metadata(self, file: UploadFile) -> str:
        """
        Check the declared type and extension of an upload.

        Returns:
            Lowercase file extension to store the file under

        Raises:
            UnsupportedFileTypeError: If type or extension is not an allowed image type
        """
        content_type = (file.content_type or "").lower()
        if content_type not in self.allowed_types:
            raise UnsupportedFileTypeError(content_type or "unknown", self.allowed_types)

        extension = Path(file.filename).suffix.lower()
        if extension not in SUPPORTED_FORMATS.get(content_type, []):
            raise FileUploadError(
                f"file extension '{extension}' doesn't match type '{content_type}'"
            )

        return extension

    def validate_content(self, content: bytes, content_type: str) -> None:
        """
        Check size and that the bytes really are an image of the declared type.

        Raises:
            FileSizeExceededError: If the file is larger than allowed
            FileUploadError: If the file is empty or not a readable image
        """
        if not content:
            raise FileUploadError("file is empty")

        if len(content) > self.max_file_size:
            raise FileSizeExceededError(len(content), self.max_file_size)

        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                pil_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"invalid image file: {e}")

        expected = PIL_FORMATS.get(content_type)
        if expected and pil_format != expected:
            raise FileUploadError(f"file content doesn't match declared type {content_type}")

    def generate_filename(self, extension: str) -> str:
        """Generate a unique storage name."""
        return f"{uuid.uuid4().hex}{extension}"

    async def read_validated(self, file: UploadFile) -> bytes:
        """
        Read an upload and run every check on it.

        Returns:
            File content

        Raises:
            FileUploadError: If the file is not an acceptable image
        """
        self.validate_metadata(file)

        await file.seek(0)
        content = await file.read()
        self.validate_content(content, (file.content_type or "").lower())
        return content

    async def write_file(self, filename: str, content: bytes) -> StagedFile:
        """
        Write validated content to disk under a new unique name.

        Raises:
            FileUploadError: If writing fails
        """
        file_path = self.upload_dir / self.generate_filename(Path(filename).suffix.lower())
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            # Clean up partial file if it exists
            if file_path.exists():
                file_path.unlink()
            logger.error(f"Failed to write upload {file_path}: {e}", exc_info=True)
            raise FileUploadError("could not store the file")

        logger.debug(f"Staged {filename} as {file_path.name} ({len(content)} bytes)")
        return StagedFile(
            original_filename=filename,
            stored_path=f"{PUBLIC_PREFIX}/{file_path.name}",
            file_size=len(content),
        )

    async def stage(self, files: List[UploadFile]) -> List[StagedFile]:
        """
        Stage uploads in the order they were received.
        Every file is validated before any of them is written.

        Returns:
            Staged files, same order as ``files``
        """
        contents = [await self.read_validated(file) for file in files]

        staged = []
        for file, content in zip(files, contents):
            staged.append(await self.write_file(file.filename, content))
        return staged
