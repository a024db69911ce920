"""
Image service for handling property image uploads, storage, and management.
Provides file validation, storage operations, and cleanup functionality.
"""

import uuid
from typing import List
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import PropertyImage
from app.models.property import Property
from app.schemas.image import PropertyImageUpdate
from app.repositories.image import ImageRepository
from app.utils.file_utils import FileValidator, FileStorage
from app.utils.exceptions import NotFoundError, FileUploadError
import logging

logger = logging.getLogger(__name__)

PROPERTY_IMAGE_DIR = "properties"


class ImageService:
    """Service for managing property image uploads and storage."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.repository = ImageRepository(db_session)
        self.storage = FileStorage()

    async def upload_images(self, property_obj: Property, files: List[UploadFile]) -> List[PropertyImage]:
        """
        Validate and store uploaded images for a listing.

        Every file is validated before anything is written. When the listing has
        no images yet, the first upload becomes the primary image.

        Args:
            property_obj: Listing receiving the images
            files: Uploaded JPEG/PNG/WebP files

        Returns:
            Created image records in upload order

        Raises:
            FileUploadError: If no file was sent or any file fails validation
        """
        if not files:
            raise FileUploadError("At least one image is required", field="images")

        validated = []
        for upload in files:
            content, width, height, mime_type = await FileValidator.validate_image_upload(upload)
            validated.append((upload.filename, content, width, height, mime_type))

        has_images = await self.repository.count_by_property_id(property_obj.id) > 0
        sort_order = await self.repository.next_sort_order(property_obj.id)

        created: List[PropertyImage] = []
        written = []
        try:
            for index, (filename, content, width, height, mime_type) in enumerate(validated):
                file_path = self.storage.generate_file_path(
                    PROPERTY_IMAGE_DIR, str(property_obj.id), filename=filename
                )
                file_size = await self.storage.save_bytes(content, file_path)
                written.append(file_path)

                image = PropertyImage(
                    property_id=property_obj.id,
                    filename=filename,
                    image_path=self.storage.get_relative_path(file_path),
                    file_size=file_size,
                    mime_type=mime_type,
                    width=width,
                    height=height,
                    is_primary=not has_images and index == 0,
                    sort_order=sort_order + index,
                )
                self.db_session.add(image)
                created.append(image)

            await self.db_session.commit()
        except Exception:
            await self.db_session.rollback()
            for file_path in written:
                self.storage.delete_file(file_path)
            raise

        logger.info(f"Uploaded {len(created)} images for property {property_obj.id}")
        return [await self.repository.get_by_id(image.id) for image in created]

    async def list_images(self, property_id: uuid.UUID) -> List[PropertyImage]:
        return await self.repository.get_by_property_id(property_id)

    async def get_image(self, property_id: uuid.UUID, image_id: uuid.UUID) -> PropertyImage:
        image = await self.repository.get_for_property(property_id, image_id)
        if not image:
            raise NotFoundError("Image", str(image_id))
        return image

    async def set_primary(self, property_id: uuid.UUID, image_id: uuid.UUID) -> PropertyImage:
        """Make one image primary and clear the flag on the others."""
        image = await self.get_image(property_id, image_id)
        await self.repository.update_primary_status(property_id, image.id)
        logger.info(f"Image {image_id} set as primary for property {property_id}")
        return await self.repository.get_by_id(image.id)

    async def update_image(
        self,
        property_id: uuid.UUID,
        image_id: uuid.UUID,
        data: PropertyImageUpdate
    ) -> PropertyImage:
        image = await self.get_image(property_id, image_id)
        values = {
            key: getattr(value, "value", value)
            for key, value in data.model_dump(exclude_unset=True).items()
        }
        return await self.repository.update(image, values)

    async def delete_image(self, property_id: uuid.UUID, image_id: uuid.UUID) -> None:
        """
        Delete an image and its file.

        If the deleted image was primary, the next image in gallery order is promoted.
        """
        image = await self.get_image(property_id, image_id)
        was_primary = image.is_primary
        relative_path = image.image_path

        await self.repository.delete(image)
        self.storage.delete_file(self.storage.resolve(relative_path))

        if was_primary:
            remaining = await self.repository.get_by_property_id(property_id)
            if remaining:
                await self.repository.update_primary_status(property_id, remaining[0].id)
                logger.debug(f"Promoted image {remaining[0].id} to primary for property {property_id}")

        logger.info(f"Image {image_id} deleted from property {property_id}")

    def remove_files(self, property_obj: Property) -> int:
        """
        Remove the stored files of every image on a listing.
        Database rows go with the listing through the relationship cascade.

        Returns:
            Number of files removed
        """
        removed = 0
        for image in property_obj.images:
            if self.storage.delete_file(self.storage.resolve(image.image_path)):
                removed += 1
        self.storage.cleanup_empty_directory(PROPERTY_IMAGE_DIR, str(property_obj.id))
        return removed
