"""
Pydantic schemas for property image requests and responses.
Handles image metadata updates and upload results.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
import uuid

from app.models.image import ImageKind
from app.schemas.common import ORMModel


class PropertyImageUpdate(BaseModel):
    """Schema for updating property image metadata."""

    title: Optional[str] = Field(None, max_length=255, description="Caption shown in the gallery")
    alt_text: Optional[str] = Field(None, max_length=255, description="Alternative text")
    type: Optional[ImageKind] = Field(None, description="gallery or floor_plan")
    sort_order: Optional[int] = Field(None, ge=0, description="Display order for image gallery")


class PropertyImageResponse(ORMModel):
    """Schema for property image response."""

    id: uuid.UUID = Field(..., description="Image unique identifier")
    property_id: uuid.UUID = Field(..., description="ID of the property this image belongs to")
    filename: str = Field(..., description="Original filename", examples=["living_room.jpg"])
    url: str = Field(..., description="Public URL of the stored file", examples=["/uploads/properties/<id>/<file>.jpg"])
    file_size: int = Field(..., description="File size in bytes")
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    title: Optional[str] = None
    alt_text: Optional[str] = None
    type: str
    is_primary: bool = Field(..., description="Whether this is the primary image for the property")
    sort_order: int = Field(..., description="Display order for image gallery")
    created_at: datetime


class ImageSummary(ORMModel):
    """Compact image reference for listing cards."""

    id: uuid.UUID
    url: str
    alt_text: Optional[str] = None
    is_primary: bool


class ImageUploadResponse(BaseModel):
    """Result of a multi-file upload."""

    uploaded: List[PropertyImageResponse] = Field(default_factory=list)
    total_images: int = Field(..., description="Images attached to the property after the upload")
