"""
Property repository for managing property listings with search and filtering.
Also covers favorites, recorded views and tour requests, which hang off a listing.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from app.repositories.base import BaseRepository
from app.models.property import (
    Property,
    PropertyStatus,
    ListingType,
    Favorite,
    PropertyView,
    PropertyTour,
)
from app.schemas.property import PropertySearchFilters
from typing import Optional, List, Dict, Set, Tuple
from datetime import date
import uuid
import logging

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "latest": (Property.created_at.desc(),),
    "price_asc": (Property.price.asc(), Property.created_at.desc()),
    "price_desc": (Property.price.desc(), Property.created_at.desc()),
}


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property management with search and filtering capabilities.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def search_available(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Property], int]:
        """
        Public search over available listings.

        Args:
            filters: Search filters
            page: Page number starting at 1
            per_page: Page size

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = select(Property).where(Property.status == PropertyStatus.AVAILABLE.value)

            if filters.keyword:
                pattern = f"%{filters.keyword.strip()}%"
                query = query.where(or_(
                    Property.title.ilike(pattern),
                    Property.description.ilike(pattern),
                    Property.address.ilike(pattern),
                ))
            if filters.property_type_id:
                query = query.where(Property.property_type_id == filters.property_type_id)
            if filters.location_id:
                query = query.where(Property.location_id == filters.location_id)
            if filters.listing_type:
                query = query.where(Property.listing_type == filters.listing_type.value)
            if filters.min_price is not None:
                query = query.where(Property.price >= filters.min_price)
            if filters.max_price is not None:
                query = query.where(Property.price <= filters.max_price)
            if filters.bedrooms is not None:
                query = query.where(Property.bedrooms >= filters.bedrooms)
            if filters.bathrooms is not None:
                query = query.where(Property.bathrooms >= filters.bathrooms)
            if filters.featured is not None:
                query = query.where(Property.is_featured == filters.featured)

            query = query.order_by(*SORT_ORDERS.get(filters.sort, SORT_ORDERS["latest"]))
            properties, total = await self.paginate(query, page, per_page)

            logger.debug(f"Property search returned {len(properties)} of {total} results")
            return properties, total
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def list_for_admin(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        listing_type: Optional[str] = None,
        property_type_id: Optional[uuid.UUID] = None,
        agent_id: Optional[uuid.UUID] = None,
        agent_scope: bool = False,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Management list, latest first.

        With agent_scope the list is restricted to agent_id; an agent without a
        linked profile (agent_id None) sees nothing.
        """
        query = select(Property)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(Property.title.ilike(pattern), Property.address.ilike(pattern)))
        if status:
            query = query.where(Property.status == status)
        if listing_type:
            query = query.where(Property.listing_type == listing_type)
        if property_type_id:
            query = query.where(Property.property_type_id == property_type_id)
        if agent_scope:
            if agent_id is None:
                return [], 0
            query = query.where(Property.agent_id == agent_id)
        elif agent_id:
            query = query.where(Property.agent_id == agent_id)

        return await self.paginate(query.order_by(Property.created_at.desc()), page, per_page)

    async def featured(self, limit: int = 6) -> Tuple[List[Property], int]:
        """Available featured listings, newest first, plus how many exist."""
        conditions = (
            Property.status == PropertyStatus.AVAILABLE.value,
            Property.is_featured.is_(True),
        )
        total = (await self.db.execute(select(func.count(Property.id)).where(*conditions))).scalar() or 0
        result = await self.db.execute(
            select(Property).where(*conditions).order_by(Property.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all()), total

    async def recent_rentals(self, limit: int = 6) -> List[Property]:
        result = await self.db.execute(
            select(Property)
            .where(
                Property.status == PropertyStatus.AVAILABLE.value,
                Property.listing_type == ListingType.RENT.value,
            )
            .order_by(Property.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_available_for_agent(self, agent_id: uuid.UUID) -> int:
        query = select(func.count(Property.id)).where(
            Property.agent_id == agent_id,
            Property.status == PropertyStatus.AVAILABLE.value,
        )
        return (await self.db.execute(query)).scalar() or 0

    async def count_by_status(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(Property.status, func.count(Property.id)).group_by(Property.status)
        )
        return {status: count for status, count in result.all()}

    async def adjust_counter(self, property_obj: Property, field: str, delta: int) -> None:
        """Shift a counter column without going below zero. Caller commits."""
        current = getattr(property_obj, field) or 0
        setattr(property_obj, field, max(0, current + delta))

    # Views

    async def record_view(
        self,
        property_obj: Property,
        user_id: Optional[uuid.UUID],
        ip_address: Optional[str],
        viewed_on: date
    ) -> None:
        self.db.add(PropertyView(
            property_id=property_obj.id,
            user_id=user_id,
            ip_address=ip_address,
            viewed_on=viewed_on,
        ))
        property_obj.views_count = (property_obj.views_count or 0) + 1
        await self.db.commit()

    async def daily_views(self, property_id: uuid.UUID, since: date) -> Dict[date, int]:
        result = await self.db.execute(
            select(PropertyView.viewed_on, func.count(PropertyView.id))
            .where(PropertyView.property_id == property_id, PropertyView.viewed_on >= since)
            .group_by(PropertyView.viewed_on)
        )
        return {viewed_on: count for viewed_on, count in result.all()}


class FavoriteRepository(BaseRepository[Favorite]):
    """Saved listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_for_user(self, user_id: uuid.UUID, property_id: uuid.UUID) -> Optional[Favorite]:
        result = await self.db.execute(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.property_id == property_id)
        )
        return result.scalars().first()

    async def favorited_ids(self, user_id: uuid.UUID, property_ids: List[uuid.UUID]) -> Set[uuid.UUID]:
        """Which of the given listings the user has saved."""
        if not property_ids:
            return set()
        result = await self.db.execute(
            select(Favorite.property_id).where(
                Favorite.user_id == user_id,
                Favorite.property_id.in_(property_ids),
            )
        )
        return set(result.scalars().all())

    async def list_for_user(self, user_id: uuid.UUID, page: int, per_page: int) -> Tuple[List[Favorite], int]:
        query = select(Favorite).where(Favorite.user_id == user_id).order_by(Favorite.created_at.desc())
        return await self.paginate(query, page, per_page)


class TourRepository(BaseRepository[PropertyTour]):
    """Tour requests."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyTour, db)

    async def list_filtered(
        self,
        property_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        agent_id: Optional[uuid.UUID] = None,
        agent_scope: bool = False,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[PropertyTour], int]:
        query = select(PropertyTour)
        if property_id:
            query = query.where(PropertyTour.property_id == property_id)
        if status:
            query = query.where(PropertyTour.status == status)
        if agent_scope:
            if agent_id is None:
                return [], 0
            query = query.join(Property, Property.id == PropertyTour.property_id).where(Property.agent_id == agent_id)
        query = query.order_by(PropertyTour.tour_date.asc(), PropertyTour.tour_time.asc())
        return await self.paginate(query, page, per_page)
