"""Schemas for roles and permissions."""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from app.schemas.common import ORMModel


class PermissionResponse(ORMModel):
    id: uuid.UUID
    name: str


class RoleResponse(ORMModel):
    id: uuid.UUID
    name: str
    permissions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("permission_names", "permissions")
    )
    created_at: datetime


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=125, examples=["editor"])
    permissions: List[str] = Field(default_factory=list, examples=[["view posts", "edit posts"]])

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip().lower()


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=125)
    permissions: Optional[List[str]] = Field(None, description="Replaces the role's permissions when given")

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return v.strip().lower() if v else v
