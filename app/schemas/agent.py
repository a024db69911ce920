"""
Pydantic schemas for agent profiles.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Dict, Optional
from datetime import datetime
import uuid

from app.schemas.common import ORMModel
from app.utils.validators import ValidationUtils


class AgentBase(BaseModel):
    """Base agent schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Karim Ahmed"])
    email: EmailStr = Field(..., examples=["karim@realty.example"])
    phone: Optional[str] = Field(None, max_length=50, examples=["+880 1711-000000"])
    license_number: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=5000)
    avatar: Optional[str] = Field(None, max_length=500)
    office_address: Optional[str] = Field(None, max_length=500)
    social_media: Optional[Dict[str, str]] = Field(
        None,
        description="Profile links keyed by network",
        examples=[{"facebook": "https://facebook.com/karim"}]
    )
    is_active: bool = True
    commission_rate: float = Field(5.00, ge=0, le=100)
    properties_sold: int = Field(0, ge=0)
    experience_years: int = Field(0, ge=0, le=80)
    user_id: Optional[uuid.UUID] = Field(None, description="Login account linked to the profile")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)

    @field_validator('license_number')
    @classmethod
    def clean_license(cls, v):
        return ValidationUtils.clean_optional(v)


class AgentCreate(AgentBase):
    pass


class AgentUpdate(BaseModel):
    """All fields optional; only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=5000)
    avatar: Optional[str] = Field(None, max_length=500)
    office_address: Optional[str] = Field(None, max_length=500)
    social_media: Optional[Dict[str, str]] = None
    is_active: Optional[bool] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    properties_sold: Optional[int] = Field(None, ge=0)
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    user_id: Optional[uuid.UUID] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class AgentSummary(ORMModel):
    """Agent reference embedded in listings."""

    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    avatar: Optional[str] = None


class AgentResponse(ORMModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    license_number: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    office_address: Optional[str] = None
    social_media: Optional[Dict[str, str]] = None
    is_active: bool
    commission_rate: float
    properties_sold: int
    experience_years: int
    user_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class AgentDetailResponse(AgentResponse):
    """Public profile with the number of listings currently on offer."""

    available_properties_count: int = 0
