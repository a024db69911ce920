"""
Schemas for the listing catalog: property types, locations and amenities.
Slugs are derived from the name by the service.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.models.catalog import PropertyCategory, LocationType
from app.schemas.common import ORMModel


def _clean_name(v):
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Name cannot be empty")
    return v.strip()


class CatalogBase(BaseModel):
    """Fields shared by every catalog entry."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    is_active: bool = Field(True, description="Inactive entries are hidden from public lists")
    sort_order: int = Field(0, ge=0, description="Display order")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class CatalogUpdateBase(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


# Property types

class PropertyTypeCreate(CatalogBase):
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    category: PropertyCategory = PropertyCategory.RESIDENTIAL


class PropertyTypeUpdate(CatalogUpdateBase):
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    category: Optional[PropertyCategory] = None


class PropertyTypeResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    category: str
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class PropertyTypeSummary(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    category: str


# Locations

class LocationCreate(CatalogBase):
    type: LocationType = LocationType.CITY
    state: Optional[str] = Field(None, max_length=255)
    country: str = Field("Bangladesh", max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class LocationUpdate(CatalogUpdateBase):
    type: Optional[LocationType] = None
    state: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class LocationResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    type: str
    state: Optional[str] = None
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class LocationSummary(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    type: str


# Amenities

class AmenityCreate(CatalogBase):
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)


class AmenityUpdate(CatalogUpdateBase):
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)


class AmenityResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class AmenitySummary(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    icon: Optional[str] = None
