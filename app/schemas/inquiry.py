"""
Schemas for property inquiries and contact-form submissions.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.models.inquiry import (
    InquiryType,
    InquiryStatus,
    ContactMethod,
    ContactInquiryType,
    ContactInquiryStatus,
)
from app.schemas.common import ORMModel
from app.utils.validators import ValidationUtils


class InquiryCreate(BaseModel):
    """Question about a listing. Authenticated users may omit name and email."""

    property_id: uuid.UUID
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    message: str = Field(..., min_length=10, max_length=2000)
    inquiry_type: InquiryType = InquiryType.GENERAL
    preferred_contact_time: Optional[str] = Field(None, max_length=100)
    preferred_contact_method: ContactMethod = ContactMethod.EMAIL

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return ValidationUtils.validate_email_address(v) if v else None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class InquiryUpdate(BaseModel):
    status: Optional[InquiryStatus] = None
    agent_notes: Optional[str] = Field(None, max_length=5000)


class InquiryResponse(ORMModel):
    id: uuid.UUID
    property_id: uuid.UUID
    property_title: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    inquiry_type: str
    status: str
    preferred_contact_time: Optional[str] = None
    preferred_contact_method: str
    agent_notes: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class ContactInquiryCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    inquiry_type: ContactInquiryType = ContactInquiryType.GENERAL
    message: str = Field(..., min_length=10, max_length=2000)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return ValidationUtils.validate_email_address(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class ContactInquiryUpdate(BaseModel):
    status: Optional[ContactInquiryStatus] = None
    assigned_to: Optional[uuid.UUID] = None
    notes: Optional[str] = Field(None, max_length=5000)


class ContactInquiryResponse(ORMModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    inquiry_type: str
    message: str
    status: str
    assigned_to: Optional[uuid.UUID] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
