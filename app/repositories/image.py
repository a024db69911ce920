"""
Repository for PropertyImage model operations.
Handles database queries and operations for property images.
"""

import uuid
from typing import List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import PropertyImage
from app.repositories.base import BaseRepository


class ImageRepository(BaseRepository[PropertyImage]):
    """Repository for PropertyImage database operations."""

    def __init__(self, db_session: AsyncSession):
        super().__init__(PropertyImage, db_session)

    async def get_by_property_id(self, property_id: uuid.UUID) -> List[PropertyImage]:
        """
        Get all images for a specific property.

        Args:
            property_id: ID of the property

        Returns:
            List of property images in gallery order
        """
        query = (
            select(PropertyImage)
            .where(PropertyImage.property_id == property_id)
            .order_by(PropertyImage.sort_order.asc(), PropertyImage.created_at.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_for_property(self, property_id: uuid.UUID, image_id: uuid.UUID) -> Optional[PropertyImage]:
        """Image by id, only if it belongs to the property."""
        result = await self.db.execute(
            select(PropertyImage)
            .where(PropertyImage.id == image_id, PropertyImage.property_id == property_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def count_by_property_id(self, property_id: uuid.UUID) -> int:
        query = select(func.count(PropertyImage.id)).where(PropertyImage.property_id == property_id)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def next_sort_order(self, property_id: uuid.UUID) -> int:
        query = select(func.max(PropertyImage.sort_order)).where(PropertyImage.property_id == property_id)
        current = (await self.db.execute(query)).scalar()
        return 0 if current is None else current + 1

    async def update_primary_status(self, property_id: uuid.UUID, new_primary_id: uuid.UUID) -> bool:
        """
        Update primary image status for a property.
        Sets one image as primary and removes primary status from others.

        Returns:
            True if the image was found and marked primary
        """
        await self.db.execute(
            update(PropertyImage)
            .where(PropertyImage.property_id == property_id)
            .values(is_primary=False)
        )
        result = await self.db.execute(
            update(PropertyImage)
            .where(PropertyImage.id == new_primary_id, PropertyImage.property_id == property_id)
            .values(is_primary=True)
        )
        await self.db.commit()
        return result.rowcount > 0
