"""
Pydantic schemas for blog categories, tags and posts.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from app.models.blog import PostStatus
from app.schemas.common import ORMModel
from app.schemas.user import UserSummary
from app.utils.validators import ValidationUtils


class TaxonomyBase(BaseModel):
    """Fields shared by categories and tags."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, description="Derived from the name when omitted")
    description: Optional[str] = Field(None, max_length=1000)
    seo_title: Optional[str] = Field(None, max_length=60)
    seo_description: Optional[str] = Field(None, max_length=160)
    seo_keywords: Optional[str] = Field(None, max_length=255)
    is_active: bool = True
    sort_order: int = Field(0, ge=0)

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, v):
        return ValidationUtils.validate_slug(v) if v else None


class TaxonomyUpdateBase(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    seo_title: Optional[str] = Field(None, max_length=60)
    seo_description: Optional[str] = Field(None, max_length=160)
    seo_keywords: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, v):
        return ValidationUtils.validate_slug(v) if v else None


class CategoryCreate(TaxonomyBase):
    image: Optional[str] = Field(None, max_length=500)


class CategoryUpdate(TaxonomyUpdateBase):
    image: Optional[str] = Field(None, max_length=500)


class TagCreate(TaxonomyBase):
    color: str = Field("#3B82F6", description="Hex colour #RRGGBB")

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        return ValidationUtils.validate_hex_color(v)


class TagUpdate(TaxonomyUpdateBase):
    color: Optional[str] = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        return ValidationUtils.validate_hex_color(v) if v else None


class CategoryResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_keywords: Optional[str] = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class TagResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    color: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_keywords: Optional[str] = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class TaxonomySummary(ORMModel):
    id: uuid.UUID
    name: str
    slug: str


class TagSummary(TaxonomySummary):
    color: str


class MediaSummary(ORMModel):
    id: uuid.UUID
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class PostBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, max_length=1000, description="Derived from the content when omitted")
    content: str = Field(..., min_length=1)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: Optional[str] = Field(None, max_length=500)
    status: PostStatus = PostStatus.DRAFT
    scheduled_at: Optional[datetime] = None
    is_featured: bool = False
    allow_comments: bool = True
    is_sticky: bool = False
    sort_order: int = Field(0, ge=0)
    category_id: Optional[uuid.UUID] = None
    featured_image_id: Optional[uuid.UUID] = None
    tag_ids: List[uuid.UUID] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


def check_schedule(status: Optional[PostStatus], scheduled_at: Optional[datetime]) -> None:
    """Scheduled posts need a publication time in the future. Naive times are UTC."""
    if status != PostStatus.SCHEDULED:
        return
    if scheduled_at is None:
        raise ValueError("scheduled_at is required for scheduled posts")
    moment = scheduled_at if scheduled_at.tzinfo else scheduled_at.replace(tzinfo=timezone.utc)
    if moment <= datetime.now(timezone.utc):
        raise ValueError("scheduled_at must be in the future")


class PostCreate(PostBase):
    scheduled_at: Optional[datetime] = Field(None, validate_default=True)

    @field_validator('scheduled_at')
    @classmethod
    def validate_schedule(cls, v, info):
        check_schedule(info.data.get("status"), v)
        return v


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = Field(None, min_length=1)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: Optional[str] = Field(None, max_length=500)
    status: Optional[PostStatus] = None
    scheduled_at: Optional[datetime] = None
    is_featured: Optional[bool] = None
    allow_comments: Optional[bool] = None
    is_sticky: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)
    category_id: Optional[uuid.UUID] = None
    featured_image_id: Optional[uuid.UUID] = None
    tag_ids: Optional[List[uuid.UUID]] = Field(None, description="Replaces the tags when given")

    @field_validator('scheduled_at')
    @classmethod
    def validate_schedule(cls, v, info):
        check_schedule(info.data.get("status"), v)
        return v


class PostSummary(ORMModel):
    id: uuid.UUID
    title: str
    slug: str
    excerpt: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    is_featured: bool
    is_sticky: bool
    reading_time: int
    views_count: int
    comments_count: int
    average_rating: float
    author: UserSummary
    category: Optional[TaxonomySummary] = None
    featured_image: Optional[MediaSummary] = None
    tags: List[TagSummary] = Field(default_factory=list)
    created_at: datetime


class PostResponse(PostSummary):
    content: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    allow_comments: bool
    reviews_count: int
    sort_order: int
    category_id: Optional[uuid.UUID] = None
    featured_image_id: Optional[uuid.UUID] = None
    updated_at: datetime
