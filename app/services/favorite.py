"""Saved listings for signed-in users."""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.property import PropertyRepository, FavoriteRepository
from app.models.property import Favorite
from app.models.user import User
from app.utils.exceptions import NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def toggle(self, property_id: uuid.UUID, user: User, notes: Optional[str] = None) -> Tuple[bool, int]:
        """
        Save the listing, or remove it when already saved.

        Returns:
            Tuple of (is_favorited, favorites_count after the change)
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))

        existing = await self.favorite_repo.get_for_user(user.id, property_id)
        if existing is not None:
            await self.db.delete(existing)
            await self.property_repo.adjust_counter(property_obj, "favorites_count", -1)
            is_favorited = False
        else:
            self.db.add(Favorite(user_id=user.id, property_id=property_id, notes=notes))
            await self.property_repo.adjust_counter(property_obj, "favorites_count", 1)
            is_favorited = True

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User {user.id} {'saved' if is_favorited else 'removed'} property {property_id}")
        return is_favorited, property_obj.favorites_count

    async def list_for_user(self, user: User, page: int, per_page: int) -> Tuple[List[Favorite], int]:
        favorites, total = await self.favorite_repo.list_for_user(user.id, page, per_page)
        for favorite in favorites:
            favorite.listing.is_favorited = True
        return favorites, total
