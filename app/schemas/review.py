"""Schemas for property and post reviews."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

from app.models.review import ReviewableType
from app.schemas.common import ORMModel, PaginatedResponse


class ReviewCreate(BaseModel):
    reviewable_type: ReviewableType = Field(..., description="property or post")
    reviewable_id: uuid.UUID
    rating: int = Field(..., ge=1, le=5, description="Stars from 1 to 5")
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewResponse(ORMModel):
    id: uuid.UUID
    user_id: uuid.UUID
    reviewer_name: str
    reviewable_type: str
    reviewable_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    is_approved: bool
    created_at: datetime
    updated_at: datetime


class ReviewStats(BaseModel):
    reviews_count: int
    average_rating: float


class ReviewListResponse(PaginatedResponse[ReviewResponse]):
    """Approved reviews of one target with its rating summary."""

    stats: ReviewStats
