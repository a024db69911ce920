"""
Schemas for messages about listings and agents.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.models.message import MessageableType
from app.schemas.common import ORMModel
from app.schemas.user import UserSummary
from app.utils.validators import ValidationUtils


class MessageCreate(BaseModel):
    """New message. Guests identify themselves with name and email."""

    messageable_type: MessageableType = Field(..., description="property or agent")
    messageable_id: uuid.UUID
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    subject: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return ValidationUtils.validate_email_address(v) if v else None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return ValidationUtils.clean_optional(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class MessageReply(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    subject: Optional[str] = Field(None, max_length=255)


class MessageResponse(ORMModel):
    id: uuid.UUID
    messageable_type: str
    messageable_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    from_user: Optional[UserSummary] = None
    to_user: Optional[UserSummary] = None
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class Conversation(BaseModel):
    """Inbox entry: everything received from one participant."""

    participant_id: Optional[uuid.UUID] = None
    participant_name: Optional[str] = None
    participant_email: Optional[str] = None
    latest_message: MessageResponse
    unread_count: int
    total_count: int


class UnreadCount(BaseModel):
    unread_count: int
