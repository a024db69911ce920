"""
Services for slugged reference entries: property types, locations, amenities,
blog categories and tags. They share one implementation parameterised by model.
"""

from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from app.repositories.base import BaseRepository
from app.models.catalog import PropertyType, Location, Amenity
from app.models.blog import Category, Tag
from app.utils.validators import ValidationUtils
from app.utils.exceptions import NotFoundError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)

EntryType = TypeVar("EntryType", PropertyType, Location, Amenity, Category, Tag)


class CatalogService(Generic[EntryType]):
    """
    CRUD for a name/slug/active/sort-order table.

    The slug is derived from the name unless the payload carries one; a clash
    is reported against whichever field produced it.
    """

    model: Type[EntryType]
    label: str

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repo = BaseRepository(self.model, db_session)

    def _ordered(self):
        return select(self.model).order_by(self.model.sort_order.asc(), self.model.name.asc())

    async def list_entries(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[EntryType], int]:
        query = self._ordered()
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(self.model.name.ilike(pattern), self.model.slug.ilike(pattern)))
        if is_active is not None:
            query = query.where(self.model.is_active == is_active)
        return await self.repo.paginate(query, page, per_page)

    async def list_active(self) -> List[EntryType]:
        result = await self.db.execute(self._ordered().where(self.model.is_active.is_(True)))
        return list(result.scalars().all())

    async def get_entry(self, entry_id: uuid.UUID) -> EntryType:
        entry = await self.repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError(self.label, str(entry_id))
        return entry

    async def _slug_for(self, values: Dict[str, Any], exclude_id: Optional[uuid.UUID] = None) -> Optional[str]:
        explicit = values.get("slug")
        if explicit:
            field, slug = "slug", explicit
        elif values.get("name"):
            field, slug = "name", ValidationUtils.slugify(values["name"])
        else:
            return None

        if await self.repo.field_taken("slug", slug, exclude_id):
            raise ValidationError.for_field(field, f"The {field} has already been taken.")
        return slug

    async def create_entry(self, data: BaseModel) -> EntryType:
        values = data.model_dump()
        values["slug"] = await self._slug_for(values)
        entry = await self.repo.create(self._to_columns(values))
        logger.info(f"{self.label} created: {entry.name} ({entry.slug})")
        return entry

    async def update_entry(self, entry_id: uuid.UUID, data: BaseModel) -> EntryType:
        entry = await self.get_entry(entry_id)
        values = data.model_dump(exclude_unset=True)

        renamed = "name" in values and values["name"] != entry.name
        if values.get("slug") or renamed:
            slug_source = {"slug": values.get("slug"), "name": values.get("name", entry.name)}
            values["slug"] = await self._slug_for(slug_source, exclude_id=entry.id)
        else:
            values.pop("slug", None)

        updated = await self.repo.update(entry, self._to_columns(values))
        logger.info(f"{self.label} updated: {updated.id}")
        return updated

    async def delete_entry(self, entry_id: uuid.UUID) -> None:
        entry = await self.get_entry(entry_id)
        await self.repo.delete(entry)
        logger.info(f"{self.label} deleted: {entry_id}")

    def _to_columns(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Enum members become their stored string values."""
        return {key: getattr(value, "value", value) for key, value in values.items()}


class PropertyTypeService(CatalogService[PropertyType]):
    model = PropertyType
    label = "Property type"


class LocationService(CatalogService[Location]):
    model = Location
    label = "Location"


class AmenityService(CatalogService[Amenity]):
    model = Amenity
    label = "Amenity"


class CategoryService(CatalogService[Category]):
    model = Category
    label = "Category"


class TagService(CatalogService[Tag]):
    model = Tag
    label = "Tag"
