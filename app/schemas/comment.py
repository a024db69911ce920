"""Schemas for blog comments and moderation."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from app.models.blog import CommentStatus
from app.schemas.common import ORMModel
from app.utils.validators import ValidationUtils


class CommentCreate(BaseModel):
    """Public comment. Guests must give a name and email."""

    post_id: uuid.UUID
    content: str = Field(..., min_length=3, max_length=5000)
    parent_id: Optional[uuid.UUID] = Field(None, description="Comment being replied to")
    author_name: Optional[str] = Field(None, max_length=255)
    author_email: Optional[str] = Field(None, max_length=255)
    author_website: Optional[str] = Field(None, max_length=255)

    @field_validator('content')
    @classmethod
    def clean_content(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Comment must be at least 3 characters")
        return v

    @field_validator('author_email')
    @classmethod
    def validate_email(cls, v):
        return ValidationUtils.validate_email_address(v) if v else None

    @field_validator('author_name', 'author_website')
    @classmethod
    def clean_optional(cls, v):
        return ValidationUtils.clean_optional(v)


class CommentUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=3, max_length=5000)
    status: Optional[CommentStatus] = None
    is_featured: Optional[bool] = None


class CommentBulkAction(BaseModel):
    ids: List[uuid.UUID] = Field(..., min_length=1)
    action: str = Field(..., pattern="^(approve|reject|spam|delete)$")


class CommentResponse(ORMModel):
    id: uuid.UUID
    post_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    display_name: str
    author_website: Optional[str] = None
    content: str
    status: str
    approved_at: Optional[datetime] = None
    likes_count: int
    replies_count: int
    is_featured: bool
    created_at: datetime


class CommentAdminResponse(CommentResponse):
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    approved_by: Optional[uuid.UUID] = None


class CommentThread(CommentResponse):
    """Approved top-level comment with its approved replies."""

    replies: List[CommentResponse] = Field(default_factory=list)


class BulkActionResult(BaseModel):
    action: str
    affected: int
