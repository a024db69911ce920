"""Schemas for SEO settings."""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime
import uuid

from app.models.seo import SeoValueType
from app.schemas.common import ORMModel


class SeoSettingUpsert(BaseModel):
    """Create or update a setting identified by its key."""

    key: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9_.]+$", examples=["site_title"])
    value: Optional[Any] = Field(None, description="Stored as text; JSON values are serialized")
    type: SeoValueType = SeoValueType.TEXT
    group: str = Field("general", min_length=1, max_length=64)
    description: Optional[str] = Field(None, max_length=1000)
    is_active: bool = True
    sort_order: int = Field(0, ge=0)

    @field_validator('key')
    @classmethod
    def clean_key(cls, v):
        return v.strip()


class SeoSettingResponse(ORMModel):
    id: uuid.UUID
    key: str
    value: Optional[str] = None
    typed_value: Optional[Any] = None
    type: str
    group: str
    description: Optional[str] = None
    is_active: bool
    sort_order: int
    updated_at: datetime
