"""Schemas for the admin dashboard and the public home page."""

from pydantic import BaseModel, Field
from typing import Dict, List

from app.schemas.common import APIResponse
from app.schemas.comment import CommentAdminResponse
from app.schemas.blog import PostSummary
from app.schemas.property import PropertySummary


class PostCounts(BaseModel):
    total: int
    published: int
    draft: int


class CommentCounts(BaseModel):
    pending: int
    approved: int


class PropertyCounts(BaseModel):
    total: int
    available: int
    featured: int


class DashboardCounts(BaseModel):
    posts: PostCounts
    categories: int = Field(..., description="Active categories")
    tags: int = Field(..., description="Active tags")
    media: int
    comments: CommentCounts
    users: int
    properties: PropertyCounts
    open_inquiries: int


class MonthlyCounts(BaseModel):
    posts: int
    comments: int
    users: int


class MonthlyPoint(BaseModel):
    month: str = Field(..., examples=["2024-05"])
    count: int


class ContentDistribution(BaseModel):
    posts_by_status: Dict[str, int]
    posts_by_category: Dict[str, int]
    media_by_type: Dict[str, int]


class DashboardResponse(BaseModel):
    counts: DashboardCounts
    this_month: MonthlyCounts
    monthly_posts: List[MonthlyPoint]
    recent_comments: List[CommentAdminResponse]
    content_distribution: ContentDistribution


class HomeResponse(BaseModel):
    featured_properties: List[PropertySummary]
    recent_rentals: List[PropertySummary]
    latest_posts: List[PostSummary]


class FeaturedPropertiesResponse(APIResponse[List[PropertySummary]]):
    """Featured listings with the number of featured listings available."""

    total_count: int
