"""
Blog repositories: posts with admin and public listings, and comment queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from app.repositories.base import BaseRepository
from app.models.associations import post_tags
from app.models.blog import Post, PostStatus, Category, Tag, Comment, CommentStatus
from typing import Optional, List, Dict, Tuple
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)


class PostRepository(BaseRepository[Post]):
    """Posts for the admin area and the public blog."""

    def __init__(self, db: AsyncSession):
        super().__init__(Post, db)

    async def list_for_admin(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        author_id: Optional[uuid.UUID] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Post], int]:
        query = select(Post)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Post.title.ilike(pattern),
                Post.content.ilike(pattern),
                Post.excerpt.ilike(pattern),
                Post.meta_title.ilike(pattern),
                Post.meta_description.ilike(pattern),
            ))
        if status:
            query = query.where(Post.status == status)
        if category_id:
            query = query.where(Post.category_id == category_id)
        if author_id:
            query = query.where(Post.user_id == author_id)
        if featured is not None:
            query = query.where(Post.is_featured == featured)

        return await self.paginate(query.order_by(Post.created_at.desc()), page, per_page)

    def _published(self):
        return select(Post).where(
            Post.status == PostStatus.PUBLISHED.value,
            Post.published_at.is_not(None),
        )

    async def list_published(
        self,
        search: Optional[str] = None,
        category_slug: Optional[str] = None,
        tag_slug: Optional[str] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Post], int]:
        """Published posts, sticky first then newest."""
        query = self._published()

        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Post.title.ilike(pattern),
                Post.content.ilike(pattern),
                Post.excerpt.ilike(pattern),
            ))
        if category_slug:
            query = query.join(Category, Category.id == Post.category_id).where(Category.slug == category_slug)
        if tag_slug:
            query = (
                query.join(post_tags, post_tags.c.post_id == Post.id)
                .join(Tag, Tag.id == post_tags.c.tag_id)
                .where(Tag.slug == tag_slug)
            )
        if featured is not None:
            query = query.where(Post.is_featured == featured)

        query = query.order_by(Post.is_sticky.desc(), Post.published_at.desc())
        return await self.paginate(query, page, per_page)

    async def latest_published(self, limit: int = 3) -> List[Post]:
        result = await self.db.execute(self._published().order_by(Post.published_at.desc()).limit(limit))
        return list(result.scalars().all())

    async def get_published_by_slug(self, slug: str) -> Optional[Post]:
        result = await self.db.execute(
            self._published().where(Post.slug == slug).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def count_by_status(self) -> Dict[str, int]:
        result = await self.db.execute(select(Post.status, func.count(Post.id)).group_by(Post.status))
        return {status: count for status, count in result.all()}

    async def count_by_category(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(func.coalesce(Category.name, "Uncategorized"), func.count(Post.id))
            .select_from(Post)
            .outerjoin(Category, Category.id == Post.category_id)
            .group_by(Category.name)
        )
        return {name: count for name, count in result.all()}

    async def created_since(self, since: datetime) -> List[datetime]:
        """Creation times of posts created on or after the moment."""
        result = await self.db.execute(select(Post.created_at).where(Post.created_at >= since))
        return list(result.scalars().all())


class CommentRepository(BaseRepository[Comment]):
    """Comments and their moderation queues."""

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)

    async def list_for_admin(
        self,
        status: Optional[str] = None,
        post_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Comment], int]:
        query = select(Comment)
        if status:
            query = query.where(Comment.status == status)
        if post_id:
            query = query.where(Comment.post_id == post_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Comment.content.ilike(pattern),
                Comment.author_name.ilike(pattern),
                Comment.author_email.ilike(pattern),
            ))
        return await self.paginate(query.order_by(Comment.created_at.desc()), page, per_page)

    async def approved_top_level(self, post_id: uuid.UUID, page: int, per_page: int) -> Tuple[List[Comment], int]:
        query = (
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.parent_id.is_(None),
                Comment.status == CommentStatus.APPROVED.value,
            )
            .order_by(Comment.is_featured.desc(), Comment.created_at.desc())
        )
        return await self.paginate(query, page, per_page)

    async def approved_replies(self, parent_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[Comment]]:
        """Approved replies grouped by parent, oldest first."""
        if not parent_ids:
            return {}
        result = await self.db.execute(
            select(Comment)
            .where(Comment.parent_id.in_(parent_ids), Comment.status == CommentStatus.APPROVED.value)
            .order_by(Comment.created_at.asc())
        )
        grouped: Dict[uuid.UUID, List[Comment]] = {}
        for reply in result.scalars().all():
            grouped.setdefault(reply.parent_id, []).append(reply)
        return grouped

    async def replies_of(self, parent_id: uuid.UUID) -> List[Comment]:
        result = await self.db.execute(select(Comment).where(Comment.parent_id == parent_id))
        return list(result.scalars().all())

    async def recent_pending(self, limit: int = 5) -> List[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.status == CommentStatus.PENDING.value)
            .order_by(Comment.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
