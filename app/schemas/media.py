"""Schemas for the media library."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

from app.schemas.common import ORMModel


class MediaUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    alt_text: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    is_active: Optional[bool] = None


class MediaResponse(ORMModel):
    id: uuid.UUID
    name: str
    file_name: str
    original_name: str
    url: str
    mime_type: str
    type: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    alt_text: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata")
    )
    is_active: bool
    uploaded_by: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
