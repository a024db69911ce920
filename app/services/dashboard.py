"""
Admin dashboard statistics and the public home page.
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.base import BaseRepository
from app.repositories.blog import PostRepository, CommentRepository
from app.repositories.inquiry import InquiryRepository
from app.repositories.media import MediaRepository
from app.repositories.user import UserRepository
from app.models.blog import Category, Tag, PostStatus, CommentStatus
from app.models.inquiry import InquiryStatus
from app.models.user import User
from app.schemas.blog import PostSummary
from app.schemas.comment import CommentAdminResponse
from app.schemas.dashboard import (
    CommentCounts,
    ContentDistribution,
    DashboardCounts,
    DashboardResponse,
    HomeResponse,
    MonthlyCounts,
    MonthlyPoint,
    PostCounts,
    PropertyCounts,
)
from app.schemas.property import PropertySummary
from app.services.property import PropertyService
import logging

logger = logging.getLogger(__name__)

SERIES_MONTHS = 12
OPEN_INQUIRY_STATUSES = [InquiryStatus.PENDING.value, InquiryStatus.CONTACTED.value]


def month_starts(now: datetime, months: int) -> List[datetime]:
    """First instant of each of the last `months` months, oldest first."""
    year, month = now.year, now.month
    starts = []
    for _ in range(months):
        starts.append(datetime(year, month, 1, tzinfo=timezone.utc))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


class DashboardService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.post_repo = PostRepository(db_session)
        self.comment_repo = CommentRepository(db_session)
        self.media_repo = MediaRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.inquiry_repo = InquiryRepository(db_session)
        self.category_repo = BaseRepository(Category, db_session)
        self.tag_repo = BaseRepository(Tag, db_session)
        self.property_service = PropertyService(db_session)

    async def overview(self, now: Optional[datetime] = None) -> DashboardResponse:
        now = now or datetime.now(timezone.utc)
        starts = month_starts(now, SERIES_MONTHS)
        this_month = starts[-1]

        posts_by_status = await self.post_repo.count_by_status()
        properties = await self.property_service.counts()

        counts = DashboardCounts(
            posts=PostCounts(
                total=sum(posts_by_status.values()),
                published=posts_by_status.get(PostStatus.PUBLISHED.value, 0),
                draft=posts_by_status.get(PostStatus.DRAFT.value, 0),
            ),
            categories=await self.category_repo.count({"is_active": True}),
            tags=await self.tag_repo.count({"is_active": True}),
            media=await self.media_repo.count(),
            comments=CommentCounts(
                pending=await self.comment_repo.count({"status": CommentStatus.PENDING.value}),
                approved=await self.comment_repo.count({"status": CommentStatus.APPROVED.value}),
            ),
            users=await self.user_repo.count(),
            properties=PropertyCounts(**properties),
            open_inquiries=await self.inquiry_repo.count({"status": OPEN_INQUIRY_STATUSES}),
        )

        monthly = MonthlyCounts(
            posts=await self.post_repo.count_created_since(this_month),
            comments=await self.comment_repo.count_created_since(this_month),
            users=await self.user_repo.count_created_since(this_month),
        )

        buckets = {start.strftime("%Y-%m"): 0 for start in starts}
        for created_at in await self.post_repo.created_since(starts[0]):
            key = created_at.strftime("%Y-%m")
            if key in buckets:
                buckets[key] += 1

        recent = await self.comment_repo.recent_pending(5)

        logger.debug("Dashboard statistics computed")
        return DashboardResponse(
            counts=counts,
            this_month=monthly,
            monthly_posts=[MonthlyPoint(month=month, count=count) for month, count in buckets.items()],
            recent_comments=[CommentAdminResponse.model_validate(comment) for comment in recent],
            content_distribution=ContentDistribution(
                posts_by_status=posts_by_status,
                posts_by_category=await self.post_repo.count_by_category(),
                media_by_type=await self.media_repo.count_by_type(),
            ),
        )


class HomeService:
    """Data for the public landing page."""

    def __init__(self, db_session: AsyncSession):
        self.property_service = PropertyService(db_session)
        self.post_repo = PostRepository(db_session)

    async def home(self, current_user: Optional[User] = None) -> HomeResponse:
        featured, _ = await self.property_service.featured(6, current_user)
        rentals = await self.property_service.recent_rentals(6, current_user)
        posts = await self.post_repo.latest_published(3)
        return HomeResponse(
            featured_properties=[PropertySummary.model_validate(p) for p in featured],
            recent_rentals=[PropertySummary.model_validate(p) for p in rentals],
            latest_posts=[PostSummary.model_validate(p) for p in posts],
        )
