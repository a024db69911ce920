"""
Media library service: uploads stored under uploads/media/<year>/<month>/.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.media import Media, MediaType
from app.models.user import User
from app.repositories.media import MediaRepository
from app.schemas.media import MediaUpdate
from app.utils.file_utils import FileValidator, FileStorage
from app.utils.exceptions import NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

MEDIA_DIR = "media"


class MediaService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repository = MediaRepository(db_session)
        self.storage = FileStorage()

    async def upload(
        self,
        file: UploadFile,
        current_user: User,
        name: Optional[str] = None,
        alt_text: Optional[str] = None,
        description: Optional[str] = None
    ) -> Media:
        """
        Validate and store a file in the media library.

        Raises:
            FileUploadError: If the type or size is not allowed, or an image cannot be read
        """
        content, width, height, mime_type = await FileValidator.validate_media_upload(file)

        now = datetime.now(timezone.utc)
        file_path = self.storage.generate_file_path(
            MEDIA_DIR, f"{now:%Y}", f"{now:%m}", filename=file.filename
        )
        size = await self.storage.save_bytes(content, file_path)

        media = Media(
            name=(name or Path(file.filename).stem)[:255],
            file_name=file_path.name,
            original_name=file.filename,
            path=self.storage.get_relative_path(file_path),
            mime_type=mime_type,
            type=MediaType.from_mime(mime_type).value,
            size=size,
            width=width,
            height=height,
            alt_text=alt_text,
            description=description,
            uploaded_by=current_user.id,
        )
        try:
            created = await self.repository.save(media)
        except Exception:
            self.storage.delete_file(file_path)
            raise

        logger.info(f"Media {created.id} uploaded by {current_user.email}: {created.original_name}")
        return created

    async def list_media(
        self,
        media_type: Optional[str],
        search: Optional[str],
        page: int,
        per_page: int
    ) -> Tuple[List[Media], int]:
        return await self.repository.list_filtered(media_type, search, page, per_page)

    async def get_media(self, media_id: uuid.UUID) -> Media:
        media = await self.repository.get_by_id(media_id)
        if not media:
            raise NotFoundError("Media", str(media_id))
        return media

    async def update_media(self, media_id: uuid.UUID, data: MediaUpdate) -> Media:
        media = await self.get_media(media_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") is None:
            values.pop("name", None)
        if values.get("is_active") is None:
            values.pop("is_active", None)
        return await self.repository.update(media, values)

    async def delete_media(self, media_id: uuid.UUID) -> None:
        """Delete the record and its file. Posts using it as featured image keep no image."""
        media = await self.get_media(media_id)
        relative_path = media.path
        await self.repository.delete(media)
        self.storage.delete_file(self.storage.resolve(relative_path))
        logger.info(f"Media {media_id} deleted")
