"""Review repository with per-target aggregates."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.repositories.base import BaseRepository
from app.models.review import Review
from typing import List, Optional, Tuple
import uuid


class ReviewRepository(BaseRepository[Review]):

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def get_for_user(
        self,
        user_id: uuid.UUID,
        reviewable_type: str,
        reviewable_id: uuid.UUID
    ) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(
                Review.user_id == user_id,
                Review.reviewable_type == reviewable_type,
                Review.reviewable_id == reviewable_id,
            )
        )
        return result.scalars().first()

    async def approved_stats(self, reviewable_type: str, reviewable_id: uuid.UUID) -> Tuple[int, float]:
        """(count, average rating) over approved reviews of a target."""
        result = await self.db.execute(
            select(func.count(Review.id), func.avg(Review.rating)).where(
                Review.reviewable_type == reviewable_type,
                Review.reviewable_id == reviewable_id,
                Review.is_approved.is_(True),
            )
        )
        count, average = result.one()
        return count or 0, float(average or 0)

    async def list_for_target(
        self,
        reviewable_type: str,
        reviewable_id: uuid.UUID,
        approved_only: bool,
        page: int,
        per_page: int
    ) -> Tuple[List[Review], int]:
        query = select(Review).where(
            Review.reviewable_type == reviewable_type,
            Review.reviewable_id == reviewable_id,
        )
        if approved_only:
            query = query.where(Review.is_approved.is_(True))
        return await self.paginate(query.order_by(Review.created_at.desc()), page, per_page)

    async def delete_for_target(self, reviewable_type: str, reviewable_id: uuid.UUID) -> List[Review]:
        """Reviews of a target, for removal along with it. Caller commits."""
        result = await self.db.execute(
            select(Review).where(
                Review.reviewable_type == reviewable_type,
                Review.reviewable_id == reviewable_id,
            )
        )
        reviews = list(result.scalars().all())
        for review in reviews:
            await self.db.delete(review)
        return reviews
