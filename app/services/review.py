"""
Review service for property and post ratings.

The target's reviews_count and average_rating always reflect its approved reviews.
"""

from decimal import Decimal
from typing import List, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.review import ReviewRepository
from app.repositories.property import PropertyRepository
from app.repositories.blog import PostRepository
from app.models.review import Review, ReviewableType
from app.models.property import Property
from app.models.blog import Post
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewUpdate, ReviewStats
from app.utils.exceptions import NotFoundError, ValidationError, ForbiddenError
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.review_repo = ReviewRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.post_repo = PostRepository(db_session)

    async def _get_target(self, reviewable_type: str, reviewable_id: uuid.UUID) -> Union[Property, Post]:
        if reviewable_type == ReviewableType.PROPERTY.value:
            target = await self.property_repo.get_by_id(reviewable_id)
            label = "Property"
        else:
            target = await self.post_repo.get_by_id(reviewable_id)
            label = "Post"
        if target is None:
            raise NotFoundError(label, str(reviewable_id))
        return target

    async def _refresh_stats(self, reviewable_type: str, reviewable_id: uuid.UUID) -> ReviewStats:
        """Recompute the target's counters from its approved reviews."""
        count, average = await self.review_repo.approved_stats(reviewable_type, reviewable_id)
        target = await self._get_target(reviewable_type, reviewable_id)
        target.reviews_count = count
        target.average_rating = Decimal(str(round(average, 2)))
        await self.db.commit()
        return ReviewStats(reviews_count=count, average_rating=round(average, 2))

    async def get_review(self, review_id: uuid.UUID) -> Review:
        review = await self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review", str(review_id))
        return review

    async def create_review(self, data: ReviewCreate, current_user: User) -> Review:
        """
        Rate a property or a post. One review per user and target.

        Raises:
            NotFoundError: If the target does not exist
            ValidationError: If the user already reviewed the target
        """
        reviewable_type = data.reviewable_type.value
        await self._get_target(reviewable_type, data.reviewable_id)

        if await self.review_repo.get_for_user(current_user.id, reviewable_type, data.reviewable_id):
            raise ValidationError.for_field("reviewable_id", "You have already reviewed this item.")

        review = await self.review_repo.create({
            "user_id": current_user.id,
            "reviewable_type": reviewable_type,
            "reviewable_id": data.reviewable_id,
            "rating": data.rating,
            "comment": data.comment,
            "is_approved": True,
        })
        await self._refresh_stats(reviewable_type, data.reviewable_id)
        logger.info(f"Review {review.id} by {current_user.email} on {reviewable_type} {data.reviewable_id}")
        return review

    async def update_review(self, review_id: uuid.UUID, data: ReviewUpdate, current_user: User) -> Review:
        review = await self.get_review(review_id)
        if review.user_id != current_user.id:
            raise ForbiddenError("You can only edit your own reviews.")

        values = {key: value for key, value in data.model_dump(exclude_unset=True).items()
                  if not (key == "rating" and value is None)}
        updated = await self.review_repo.update(review, values)
        await self._refresh_stats(updated.reviewable_type, updated.reviewable_id)
        return updated

    async def delete_review(self, review_id: uuid.UUID, current_user: User) -> None:
        review = await self.get_review(review_id)
        if review.user_id != current_user.id and not current_user.has_permission("delete reviews"):
            raise ForbiddenError()

        reviewable_type, reviewable_id = review.reviewable_type, review.reviewable_id
        await self.review_repo.delete(review)
        await self._refresh_stats(reviewable_type, reviewable_id)
        logger.info(f"Review {review_id} deleted by {current_user.email}")

    async def set_approval(self, review_id: uuid.UUID, approved: bool) -> Review:
        review = await self.get_review(review_id)
        updated = await self.review_repo.update(review, {"is_approved": approved})
        await self._refresh_stats(updated.reviewable_type, updated.reviewable_id)
        logger.info(f"Review {review_id} {'approved' if approved else 'unapproved'}")
        return updated

    async def list_reviews(
        self,
        reviewable_type: ReviewableType,
        reviewable_id: uuid.UUID,
        page: int,
        per_page: int,
        approved_only: bool = True
    ) -> Tuple[List[Review], int]:
        await self._get_target(reviewable_type.value, reviewable_id)
        return await self.review_repo.list_for_target(
            reviewable_type.value, reviewable_id, approved_only, page, per_page
        )

    async def stats(self, reviewable_type: ReviewableType, reviewable_id: uuid.UUID) -> ReviewStats:
        count, average = await self.review_repo.approved_stats(reviewable_type.value, reviewable_id)
        return ReviewStats(reviews_count=count, average_rating=round(average, 2))
