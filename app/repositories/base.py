"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, Select
from app.database import Base
from app.utils.validators import ValidationUtils
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Tuple
import uuid
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Uses async SQLAlchemy for all database operations with proper error handling.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance with its relationships loaded
        """
        return await self.save(self.model(**obj_in))

    async def save(self, db_obj: ModelType) -> ModelType:
        """
        Add (or re-add) an instance, commit and return it freshly loaded.

        Raises:
            Exception: If database operation fails
        """
        try:
            self.db.add(db_obj)
            await self.db.commit()
            saved = await self.get_by_id(db_obj.id)
            logger.debug(f"Saved {self.model.__name__} with id: {db_obj.id}")
            return saved
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save {self.model.__name__}: {e}")
            raise

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Always repopulates the identity-mapped instance so eager relationships
        reflect the latest committed state.

        Args:
            id: UUID of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        try:
            query = (
                select(self.model)
                .where(self.model.id == id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            obj = result.scalar_one_or_none()

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} with id: {id}")
            else:
                logger.debug(f"{self.model.__name__} with id {id} not found")

            return obj
        except Exception as e:
            logger.error(f"Failed to get {self.model.__name__} by id {id}: {e}")
            raise

    def _apply_filters(self, query: Select, filters: Optional[Dict[str, Any]]) -> Select:
        if filters:
            for field, value in filters.items():
                if value is None or not hasattr(self.model, field):
                    continue
                column = getattr(self.model, field)
                if isinstance(value, (list, tuple, set)):
                    query = query.where(column.in_(list(value)))
                else:
                    query = query.where(column == value)
        return query

    async def paginate(self, query: Select, page: int, per_page: int) -> Tuple[List[ModelType], int]:
        """
        Run a select for one page and count every row it matches.

        Returns:
            Tuple of (items, total)
        """
        try:
            count_query = select(func.count()).select_from(query.order_by(None).subquery())
            total = (await self.db.execute(count_query)).scalar() or 0

            result = await self.db.execute(query.offset((page - 1) * per_page).limit(per_page))
            items = list(result.scalars().unique().all())

            logger.debug(f"Paginated {self.model.__name__}: page {page}, {len(items)} of {total}")
            return items, total
        except Exception as e:
            logger.error(f"Failed to paginate {self.model.__name__} records: {e}")
            raise

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Apply field values to a record and commit.

        Args:
            db_obj: Instance to update
            obj_in: Dictionary of field values to update

        Returns:
            Updated model instance

        Raises:
            Exception: If database operation fails
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        return await self.save(db_obj)

    async def delete(self, db_obj: ModelType) -> None:
        """
        Delete a record, cascading through ORM relationships.

        Raises:
            Exception: If database operation fails
        """
        try:
            record_id = db_obj.id
            await self.db.delete(db_obj)
            await self.db.commit()
            logger.debug(f"Deleted {self.model.__name__} with id: {record_id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {self.model.__name__}: {e}")
            raise

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count records with optional filtering.

        Args:
            filters: Dictionary of field filters

        Returns:
            Number of matching records
        """
        try:
            query = self._apply_filters(select(func.count(self.model.id)), filters)
            result = await self.db.execute(query)
            count = result.scalar() or 0

            logger.debug(f"Counted {count} {self.model.__name__} records")
            return count
        except Exception as e:
            logger.error(f"Failed to count {self.model.__name__} records: {e}")
            raise

    async def exists(self, id: uuid.UUID) -> bool:
        """
        Check if a record exists by its ID.

        Args:
            id: UUID of the record to check

        Returns:
            True if record exists, False otherwise
        """
        query = select(func.count(self.model.id)).where(self.model.id == id)
        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a record by a specific field value.

        Args:
            field: Field name to search by
            value: Value to search for

        Returns:
            Model instance if found, None otherwise
        """
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")

        query = (
            select(self.model)
            .where(getattr(self.model, field) == value)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get_many_by_ids(self, ids: List[uuid.UUID]) -> List[ModelType]:
        if not ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

    async def field_taken(self, field: str, value: Any, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """Whether another record already uses the value for a unique field."""
        query = select(func.count(self.model.id)).where(getattr(self.model, field) == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def unique_slug(self, text: str, exclude_id: Optional[uuid.UUID] = None) -> str:
        """
        Slug for the text that no other record uses: "slug", then "slug-1", "slug-2", ...
        """
        base = ValidationUtils.slugify(text)
        candidate = base
        counter = 1
        while await self.field_taken("slug", candidate, exclude_id):
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate

    async def count_created_since(self, since: datetime) -> int:
        query = select(func.count(self.model.id)).where(self.model.created_at >= since)
        result = await self.db.execute(query)
        return result.scalar() or 0
