"""
Blog models: categories, tags, posts and comments.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.associations import post_tags
from app.models.catalog import SluggedMixin
from app.models.media import Media
from app.models.user import User
from datetime import datetime
from decimal import Decimal
import enum
import math
import re
import uuid
from typing import List, Optional


class Category(SluggedMixin, Base):
    """Blog category."""

    __tablename__ = "categories"

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    seo_title: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    seo_description: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    seo_keywords: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Tag(SluggedMixin, Base):
    """Blog tag with a display colour."""

    __tablename__ = "tags"

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    seo_title: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    seo_description: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    seo_keywords: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    ARCHIVED = "archived"


WORDS_PER_MINUTE = 200


class Post(Base):
    """Blog post written by a user, filed under a category and tagged."""

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    meta_keywords: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PostStatus.DRAFT.value,
        index=True
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    allow_comments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_sticky: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    featured_image_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("media.id", ondelete="SET NULL"),
        nullable=True
    )

    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rating: Mapped[Decimal] = mapped_column(Numeric(precision=3, scale=2), nullable=False, default=Decimal("0"))
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author: Mapped[User] = relationship("User", lazy="selectin")
    category: Mapped[Optional[Category]] = relationship("Category", lazy="selectin")
    featured_image: Mapped[Optional[Media]] = relationship("Media", lazy="selectin")
    tags: Mapped[List[Tag]] = relationship("Tag", secondary=post_tags, lazy="selectin", order_by="Tag.name")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan"
    )

    @property
    def reading_time(self) -> int:
        """Estimated minutes to read the post, never less than one."""
        words = len(re.sub(r"<[^>]+>", " ", self.content or "").split())
        return max(1, math.ceil(words / WORDS_PER_MINUTE))

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED.value and self.published_at is not None

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug={self.slug}, status={self.status})>"


class CommentStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SPAM = "spam"


class Comment(Base):
    """Comment on a post, left by a user or a guest. Replies point at a parent comment."""

    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    author_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    author_website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=CommentStatus.PENDING.value,
        index=True
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    replies_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    post: Mapped[Post] = relationship("Post", back_populates="comments")
    user: Mapped[Optional[User]] = relationship("User", foreign_keys=[user_id], lazy="selectin")
    replies: Mapped[List["Comment"]] = relationship(
        "Comment",
        cascade="all, delete-orphan",
        foreign_keys=[parent_id]
    )

    @property
    def is_approved(self) -> bool:
        return self.status == CommentStatus.APPROVED.value

    @property
    def display_name(self) -> str:
        if self.user is not None:
            return self.user.name
        return self.author_name or "Anonymous"
