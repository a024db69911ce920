"""
Pydantic schemas for user requests and responses.
Handles user creation, updates, role assignment and email validation.
"""

from pydantic import AliasChoices, BaseModel, EmailStr, Field, ValidationInfo, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from app.schemas.common import ORMModel


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Rahim Uddin"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["rahim@example.com"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class UserCreate(UserBase):
    """Schema for an admin creating a user."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters)"
    )

    is_active: bool = Field(True, description="Whether the account can log in")

    roles: List[str] = Field(
        default_factory=list,
        description="Role names to assign; defaults to the user role"
    )


class UserUpdate(BaseModel):
    """Schema for updating an existing user. Only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    is_active: Optional[bool] = None
    roles: Optional[List[str]] = Field(None, description="Replaces the user's roles when given")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v


class AssignRolesRequest(BaseModel):
    """Replace a user's roles with the named roles."""

    roles: List[str] = Field(..., description="Role names", examples=[["agent"]])


class ProfileUpdate(BaseModel):
    """Authenticated user's own profile update."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    current_password: Optional[str] = Field(None, description="Required when changing the password")
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    password_confirmation: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator('password_confirmation')
    @classmethod
    def validate_confirmation(cls, v, info: ValidationInfo):
        if info.data.get("password") is not None and v != info.data.get("password"):
            raise ValueError("The password confirmation does not match")
        return v


class UserSummary(ORMModel):
    """Minimal user reference embedded in other resources."""

    id: uuid.UUID
    name: str
    email: str


class UserResponse(ORMModel):
    """User response schema (excluding sensitive data)."""

    id: uuid.UUID
    name: str
    email: str
    is_active: bool
    email_verified_at: Optional[datetime] = None
    current_team_id: Optional[uuid.UUID] = None
    roles: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("role_names", "roles"),
        description="Names of the user's roles"
    )
    created_at: datetime
    updated_at: datetime


class CurrentUserResponse(UserResponse):
    """The authenticated user, with effective permissions."""

    permissions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("permission_names", "permissions")
    )

    @field_validator('permissions', mode='before')
    @classmethod
    def sort_permissions(cls, v):
        return sorted(v) if v else []
