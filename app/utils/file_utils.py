"""
File upload utilities for validating and storing uploaded files on disk.
Provides image validation with Pillow and async storage with aiofiles.
"""

import io
import uuid
from pathlib import Path
from typing import List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from app.config import get_settings
from app.utils.exceptions import FileUploadError


class FileValidator:
    """Utility class for file validation operations."""

    # Supported image formats and their extensions
    SUPPORTED_IMAGE_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp'],
        'image/gif': ['.gif'],
    }

    # Pillow format names per MIME type
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp',
        'image/gif': 'gif',
    }

    MIN_WIDTH = 100
    MIN_HEIGHT = 100
    MAX_WIDTH = 10000
    MAX_HEIGHT = 10000

    @classmethod
    def validate_file_extension(cls, filename: str, mime_type: str) -> str:
        """Return the lowercase extension, checking it matches the declared image type."""
        if not filename:
            raise FileUploadError("Filename is required")

        extension = Path(filename).suffix.lower()
        if not extension:
            raise FileUploadError("File must have an extension")

        expected = cls.SUPPORTED_IMAGE_FORMATS.get(mime_type, [])
        if extension not in expected:
            raise FileUploadError(
                f"File extension '{extension}' doesn't match MIME type '{mime_type}'"
            )
        return extension

    @classmethod
    def validate_mime_type(cls, mime_type: str, allowed_types: List[str]) -> str:
        if not mime_type:
            raise FileUploadError("MIME type is required")

        if mime_type not in allowed_types:
            raise FileUploadError(
                f"File type '{mime_type}' not allowed. "
                f"Supported types: {', '.join(allowed_types)}"
            )
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or get_settings().max_file_size
        if file_size > max_allowed:
            max_mb = max_allowed / (1024 * 1024)
            actual_mb = file_size / (1024 * 1024)
            raise FileUploadError(
                f"File size ({actual_mb:.1f}MB) exceeds maximum allowed size ({max_mb:.1f}MB)"
            )
        return file_size

    @classmethod
    def validate_image_dimensions(cls, width: int, height: int) -> Tuple[int, int]:
        if width < cls.MIN_WIDTH or height < cls.MIN_HEIGHT:
            raise FileUploadError(
                f"Image dimensions {width}x{height}px are below the minimum "
                f"{cls.MIN_WIDTH}x{cls.MIN_HEIGHT}px"
            )
        if width > cls.MAX_WIDTH or height > cls.MAX_HEIGHT:
            raise FileUploadError(
                f"Image dimensions {width}x{height}px exceed the maximum "
                f"{cls.MAX_WIDTH}x{cls.MAX_HEIGHT}px"
            )
        return width, height

    @classmethod
    def inspect_image(cls, content: bytes, mime_type: str) -> Tuple[int, int]:
        """Open the bytes with Pillow and check the real format matches the declared one."""
        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                pil_format = (img.format or "").lower()
        except (UnidentifiedImageError, OSError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        expected = cls.PIL_FORMATS.get(mime_type)
        if expected and pil_format != expected:
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )
        return width, height

    @classmethod
    async def read_upload(cls, file: UploadFile) -> bytes:
        await file.seek(0)
        content = await file.read()
        await file.seek(0)
        return content

    @classmethod
    async def validate_image_upload(cls, file: UploadFile) -> Tuple[bytes, int, int, str]:
        """
        Comprehensive validation of an uploaded listing image.

        Returns:
            Tuple of (content, width, height, mime_type)

        Raises:
            FileUploadError: If any validation fails
        """
        settings = get_settings()
        mime_type = cls.validate_mime_type(file.content_type or "", settings.allowed_image_types)
        cls.validate_file_extension(file.filename or "", mime_type)

        content = await cls.read_upload(file)
        cls.validate_file_size(len(content))

        width, height = cls.inspect_image(content, mime_type)
        cls.validate_image_dimensions(width, height)
        return content, width, height, mime_type

    @classmethod
    async def validate_media_upload(cls, file: UploadFile) -> Tuple[bytes, Optional[int], Optional[int], str]:
        """
        Validate a media library upload. Images also get their dimensions read.

        Returns:
            Tuple of (content, width, height, mime_type)
        """
        settings = get_settings()
        if not file.filename:
            raise FileUploadError("Filename is required")

        mime_type = cls.validate_mime_type(file.content_type or "", settings.allowed_media_types)
        content = await cls.read_upload(file)
        cls.validate_file_size(len(content))

        width = height = None
        if mime_type in cls.PIL_FORMATS:
            width, height = cls.inspect_image(content, mime_type)
        return content, width, height, mime_type


class FileStorage:
    """Utility class for file storage operations under the upload directory."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir or get_settings().upload_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_unique_filename(self, original_filename: str) -> str:
        """Generate a unique filename while preserving the extension."""
        extension = Path(original_filename).suffix.lower()
        return f"{uuid.uuid4()}{extension}"

    def generate_file_path(self, *subdirs: str, filename: str) -> Path:
        """Full path for a new file, e.g. generate_file_path("properties", "<id>", filename="a.jpg")."""
        directory = self.base_dir.joinpath(*subdirs)
        directory.mkdir(parents=True, exist_ok=True)
        return directory / self.generate_unique_filename(filename)

    def get_relative_path(self, full_path: Path) -> str:
        return full_path.relative_to(self.base_dir).as_posix()

    def resolve(self, relative_path: str) -> Path:
        return self.base_dir / relative_path

    async def save_bytes(self, content: bytes, file_path: Path) -> int:
        """
        Write content to disk.

        Returns:
            Number of bytes written

        Raises:
            FileUploadError: If the file cannot be written
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
            return len(content)
        except OSError as e:
            self.delete_file(file_path)
            raise FileUploadError(f"Failed to save file: {str(e)}")

    def delete_file(self, file_path: Path) -> bool:
        """Delete a file from disk. Returns True if a file was removed."""
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError:
            return False

    def cleanup_empty_directory(self, *subdirs: str) -> bool:
        directory = self.base_dir.joinpath(*subdirs)
        try:
            if directory.exists() and not any(directory.iterdir()):
                directory.rmdir()
                return True
            return False
        except OSError:
            return False
