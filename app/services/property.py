"""
Property service for managing property listings with business logic validation.
Handles CRUD operations, ownership validation, search, public views and view statistics.
"""

from typing import Optional, List, Dict, Any, Tuple, Union
from datetime import date, timedelta
from sqlalchemy import delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.base import BaseRepository
from app.repositories.property import PropertyRepository, FavoriteRepository
from app.repositories.review import ReviewRepository
from app.models.property import Property, PropertyStatus
from app.models.catalog import PropertyType, Location, Amenity
from app.models.agent import Agent
from app.models.message import Message, MessageableType
from app.models.review import ReviewableType
from app.models.user import User
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertySearchFilters,
    PropertyViewStats,
    DailyViews,
)
from app.services.image import ImageService
from app.utils.exceptions import (
    APIException,
    NotFoundError,
    ValidationError,
    BadRequestError,
    InsufficientPermissionsError
)
import uuid
import logging

logger = logging.getLogger(__name__)

VIEW_STATS_DAYS = 30


class PropertyService:
    """
    Property service for managing property listings.
    Agents without admin rights are limited to listings on their own agent profile.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.image_service = ImageService(db_session)
        self.type_repo = BaseRepository(PropertyType, db_session)
        self.location_repo = BaseRepository(Location, db_session)
        self.agent_repo = BaseRepository(Agent, db_session)
        self.amenity_repo = BaseRepository(Amenity, db_session)

    # Lookups

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID.

        Raises:
            NotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        return property_obj

    async def get_managed_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        """
        Get a listing the user is allowed to manage.

        Raises:
            NotFoundError: If property doesn't exist
            InsufficientPermissionsError: If an agent does not own the listing
        """
        property_obj = await self.get_property(property_id)
        if not property_obj.is_managed_by(current_user):
            logger.warning(f"User {current_user.id} denied access to property {property_id}")
            raise InsufficientPermissionsError()
        return property_obj

    async def list_for_admin(
        self,
        current_user: User,
        search: Optional[str] = None,
        status: Optional[str] = None,
        listing_type: Optional[str] = None,
        property_type_id: Optional[uuid.UUID] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Property], int]:
        agent_scope = current_user.is_agent
        agent_id = None
        if agent_scope and current_user.agent_profile is not None:
            agent_id = current_user.agent_profile.id

        return await self.property_repo.list_for_admin(
            search=search,
            status=status,
            listing_type=listing_type,
            property_type_id=property_type_id,
            agent_id=agent_id,
            agent_scope=agent_scope,
            page=page,
            per_page=per_page,
        )

    # Create / update / delete

    async def _validate_references(self, values: Dict[str, Any]) -> None:
        """
        Check that referenced catalog rows exist.

        Raises:
            ValidationError: Keyed by the offending field
        """
        errors: Dict[str, List[str]] = {}

        checks = (
            ("property_type_id", self.type_repo, "property type"),
            ("location_id", self.location_repo, "location"),
            ("agent_id", self.agent_repo, "agent"),
        )
        for field, repo, label in checks:
            value = values.get(field)
            if value is not None and not await repo.exists(value):
                errors[field] = [f"The selected {label} is invalid."]

        amenity_ids = values.get("amenity_ids")
        if amenity_ids:
            found = await self.amenity_repo.get_many_by_ids(list(set(amenity_ids)))
            if len(found) != len(set(amenity_ids)):
                errors["amenity_ids"] = ["One or more selected amenities are invalid."]

        if errors:
            raise ValidationError(field_errors=errors)

    def _column_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {key: getattr(value, "value", value) for key, value in values.items()}

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a new property listing.

        Args:
            property_data: Property creation data
            current_user: User creating the property

        Returns:
            Created property instance

        Raises:
            ValidationError: If a referenced row does not exist
            BadRequestError: If the listing cannot be stored
        """
        values = property_data.model_dump()
        amenity_ids = values.pop("amenity_ids", [])

        if values.get("agent_id") is None and current_user.is_agent and current_user.agent_profile:
            values["agent_id"] = current_user.agent_profile.id

        await self._validate_references({**values, "amenity_ids": amenity_ids})

        try:
            property_obj = Property(**self._column_values(values))
            property_obj.slug = await self.property_repo.unique_slug(values["title"])
            property_obj.amenities = await self.amenity_repo.get_many_by_ids(amenity_ids)

            created = await self.property_repo.save(property_obj)
            logger.info(
                f"Property created by user {current_user.email}: {created.title} (ID: {created.id})"
            )
            return created

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Update a listing. A new title regenerates the slug; amenity_ids replaces the amenities.

        Raises:
            NotFoundError: If property doesn't exist
            InsufficientPermissionsError: If an agent does not own the listing
            ValidationError: If a referenced row does not exist
        """
        property_obj = await self.get_managed_property(property_id, current_user)

        values = property_data.model_dump(exclude_unset=True)
        amenity_ids = values.pop("amenity_ids", None)

        for required in ("property_type_id", "location_id", "title", "address", "price", "listing_type"):
            if required in values and values[required] is None:
                values.pop(required)

        await self._validate_references({**values, "amenity_ids": amenity_ids})

        if "title" in values and values["title"] != property_obj.title:
            values["slug"] = await self.property_repo.unique_slug(values["title"], exclude_id=property_obj.id)

        if amenity_ids is not None:
            property_obj.amenities = await self.amenity_repo.get_many_by_ids(amenity_ids)

        updated = await self.property_repo.update(property_obj, self._column_values(values))
        logger.info(f"Property updated by user {current_user.email}: {property_id}")
        return updated

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a listing with its images (rows and files), favorites, views, tours,
        inquiries, reviews and messages.
        """
        property_obj = await self.get_managed_property(property_id, current_user)
        await self._delete(property_obj)
        logger.info(f"Property deleted by user {current_user.email}: {property_id}")

    async def _delete(self, property_obj: Property) -> None:
        removed = self.image_service.remove_files(property_obj)
        logger.debug(f"Removed {removed} image files for property {property_obj.id}")

        await self.review_repo.delete_for_target(ReviewableType.PROPERTY.value, property_obj.id)
        await self.db.execute(
            sql_delete(Message).where(
                Message.messageable_type == MessageableType.PROPERTY.value,
                Message.messageable_id == property_obj.id,
            )
        )
        await self.property_repo.delete(property_obj)

    async def bulk_delete(self, ids: List[uuid.UUID], current_user: User) -> int:
        """
        Delete several listings. Unknown ids are skipped; any listing the user
        cannot manage aborts the whole request before anything is deleted.

        Returns:
            Number of listings deleted
        """
        targets = await self.property_repo.get_many_by_ids(list(set(ids)))
        for property_obj in targets:
            if not property_obj.is_managed_by(current_user):
                raise InsufficientPermissionsError()

        for property_obj in targets:
            await self._delete(property_obj)

        logger.info(f"Bulk deleted {len(targets)} properties by user {current_user.email}")
        return len(targets)

    # Public

    async def mark_favorites(self, properties: List[Property], current_user: Optional[User]) -> List[Property]:
        """Set is_favorited on each listing for the viewing user."""
        favorited = set()
        if current_user is not None:
            favorited = await self.favorite_repo.favorited_ids(current_user.id, [p.id for p in properties])
        for property_obj in properties:
            property_obj.is_favorited = property_obj.id in favorited
        return properties

    async def search(
        self,
        filters: PropertySearchFilters,
        page: int,
        per_page: int,
        current_user: Optional[User] = None
    ) -> Tuple[List[Property], int]:
        properties, total = await self.property_repo.search_available(filters, page, per_page)
        await self.mark_favorites(properties, current_user)
        return properties, total

    async def get_public_property(self, identifier: Union[str, uuid.UUID], current_user: Optional[User] = None) -> Property:
        """
        Look a listing up by id or slug for public display.

        Listings that are not available are hidden unless the viewer manages them.
        """
        property_obj = None
        try:
            property_obj = await self.property_repo.get_by_id(uuid.UUID(str(identifier)))
        except ValueError:
            pass
        if property_obj is None:
            property_obj = await self.property_repo.get_by_field("slug", str(identifier))

        if property_obj is None:
            raise NotFoundError("Property")

        if not property_obj.is_available and not self._can_preview(property_obj, current_user):
            raise NotFoundError("Property")

        return property_obj

    def _can_preview(self, property_obj: Property, current_user: Optional[User]) -> bool:
        return (
            current_user is not None
            and current_user.has_permission("access admin panel")
            and property_obj.is_managed_by(current_user)
        )

    async def show_public(
        self,
        identifier: Union[str, uuid.UUID],
        current_user: Optional[User] = None,
        ip_address: Optional[str] = None
    ) -> Property:
        """Public detail page: records a view and increments views_count."""
        property_obj = await self.get_public_property(identifier, current_user)
        await self.property_repo.record_view(
            property_obj,
            user_id=current_user.id if current_user else None,
            ip_address=ip_address,
            viewed_on=date.today(),
        )
        await self.mark_favorites([property_obj], current_user)
        return property_obj

    async def view_stats(self, property_id: uuid.UUID, current_user: User) -> PropertyViewStats:
        """Daily view counts for the last 30 days, oldest first, with empty days as 0."""
        property_obj = await self.get_managed_property(property_id, current_user)

        today = date.today()
        since = today - timedelta(days=VIEW_STATS_DAYS - 1)
        counts = await self.property_repo.daily_views(property_obj.id, since)

        days = [
            DailyViews(day=since + timedelta(days=offset), views=counts.get(since + timedelta(days=offset), 0))
            for offset in range(VIEW_STATS_DAYS)
        ]
        return PropertyViewStats(property_id=property_obj.id, total_views=property_obj.views_count, days=days)

    async def featured(self, limit: int = 6, current_user: Optional[User] = None) -> Tuple[List[Property], int]:
        properties, total = await self.property_repo.featured(limit)
        await self.mark_favorites(properties, current_user)
        return properties, total

    async def recent_rentals(self, limit: int = 6, current_user: Optional[User] = None) -> List[Property]:
        properties = await self.property_repo.recent_rentals(limit)
        return await self.mark_favorites(properties, current_user)

    async def counts(self) -> Dict[str, int]:
        by_status = await self.property_repo.count_by_status()
        return {
            "total": sum(by_status.values()),
            "available": by_status.get(PropertyStatus.AVAILABLE.value, 0),
            "featured": await self.property_repo.count({"is_featured": True}),
        }

