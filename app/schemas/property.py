"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, search filters, and validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
import uuid

from app.models.property import ListingType, PropertyStatus, TourStatus
from app.schemas.common import ORMModel
from app.schemas.agent import AgentSummary
from app.schemas.catalog import PropertyTypeSummary, LocationSummary, AmenitySummary
from app.schemas.image import PropertyImageResponse, ImageSummary
from app.utils.validators import ValidationUtils


def _max_built_year() -> int:
    return date.today().year + 5


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Modern 3 Bed Apartment in Gulshan"]
    )

    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Detailed property description"
    )

    listing_type: ListingType = Field(..., description="sale or rent", examples=["sale"])
    status: PropertyStatus = Field(PropertyStatus.AVAILABLE, description="Listing status")

    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=15,
        decimal_places=2,
        description="Asking price in the listing currency",
        examples=[12500000]
    )
    monthly_rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    currency: str = Field("BDT", min_length=3, max_length=3)

    bedrooms: int = Field(0, ge=0, le=20, description="Number of bedrooms")
    bathrooms: int = Field(0, ge=0, le=20, description="Number of bathrooms")
    total_rooms: Optional[int] = Field(None, ge=0)
    area_sqft: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    land_area_sqft: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    floors: Optional[int] = Field(None, ge=1, le=10)
    floor_number: Optional[int] = Field(None, ge=0)
    built_year: Optional[int] = Field(None, ge=1800, description="Year of construction")

    address: str = Field(..., min_length=1, max_length=500, description="Street address")
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90, description="Property latitude coordinate")
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180, description="Property longitude coordinate")
    postal_code: Optional[str] = Field(None, max_length=20)

    is_furnished: bool = False
    has_parking: bool = False
    parking_spaces: int = Field(0, ge=0, le=20)
    pet_friendly: bool = False
    is_featured: bool = False

    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: Optional[str] = Field(None, max_length=500)

    property_type_id: uuid.UUID = Field(..., description="Property type")
    location_id: uuid.UUID = Field(..., description="Location")
    agent_id: Optional[uuid.UUID] = Field(None, description="Listing agent; agents default to their own profile")
    amenity_ids: List[uuid.UUID] = Field(default_factory=list, description="Amenities to attach")

    @field_validator('title', 'address')
    @classmethod
    def strip_required_text(cls, v):
        """Validate and clean required text fields."""
        if not v or not v.strip():
            raise ValueError("This field cannot be empty")
        return v.strip()

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v):
        return v.upper()

    @field_validator('built_year')
    @classmethod
    def validate_built_year(cls, v):
        if v is not None and v > _max_built_year():
            raise ValueError(f"Built year cannot be later than {_max_built_year()}")
        return v


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Modern 3 Bed Apartment in Gulshan",
                "description": "South facing apartment with lake view.",
                "listing_type": "sale",
                "price": 12500000,
                "bedrooms": 3,
                "bathrooms": 3,
                "area_sqft": 1850,
                "address": "Road 45, Gulshan 2, Dhaka",
                "property_type_id": "123e4567-e89b-12d3-a456-426614174000",
                "location_id": "123e4567-e89b-12d3-a456-426614174001",
                "amenity_ids": []
            }
        }
    }


class PropertyUpdate(BaseModel):
    """Schema for updating an existing property. Only provided fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    listing_type: Optional[ListingType] = None
    status: Optional[PropertyStatus] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    monthly_rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    bedrooms: Optional[int] = Field(None, ge=0, le=20)
    bathrooms: Optional[int] = Field(None, ge=0, le=20)
    total_rooms: Optional[int] = Field(None, ge=0)
    area_sqft: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    land_area_sqft: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    floors: Optional[int] = Field(None, ge=1, le=10)
    floor_number: Optional[int] = Field(None, ge=0)
    built_year: Optional[int] = Field(None, ge=1800)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    postal_code: Optional[str] = Field(None, max_length=20)
    is_furnished: Optional[bool] = None
    has_parking: Optional[bool] = None
    parking_spaces: Optional[int] = Field(None, ge=0, le=20)
    pet_friendly: Optional[bool] = None
    is_featured: Optional[bool] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    meta_keywords: Optional[str] = Field(None, max_length=500)
    property_type_id: Optional[uuid.UUID] = None
    location_id: Optional[uuid.UUID] = None
    agent_id: Optional[uuid.UUID] = None
    amenity_ids: Optional[List[uuid.UUID]] = Field(None, description="Replaces the amenities when given")

    @field_validator('title', 'address')
    @classmethod
    def strip_text(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("This field cannot be empty")
            return v.strip()
        return v

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

    @field_validator('built_year')
    @classmethod
    def validate_built_year(cls, v):
        if v is not None and v > _max_built_year():
            raise ValueError(f"Built year cannot be later than {_max_built_year()}")
        return v


class BulkDeleteRequest(BaseModel):
    ids: List[uuid.UUID] = Field(..., min_length=1, description="Identifiers to delete")


class PropertySummary(ORMModel):
    """Listing card used in search results and lists."""

    id: uuid.UUID
    title: str
    slug: str
    listing_type: str
    status: str
    price: float
    monthly_rent: Optional[float] = None
    currency: str
    bedrooms: int
    bathrooms: int
    area_sqft: Optional[float] = None
    address: str
    is_featured: bool
    views_count: int
    favorites_count: int
    average_rating: float
    property_type: PropertyTypeSummary
    location: LocationSummary
    agent: Optional[AgentSummary] = None
    primary_image: Optional[ImageSummary] = None
    is_favorited: bool = Field(False, description="Whether the current user saved this listing")
    created_at: datetime


class PropertyResponse(PropertySummary):
    """Full listing with relations."""

    description: Optional[str] = None
    total_rooms: Optional[int] = None
    land_area_sqft: Optional[float] = None
    floors: Optional[int] = None
    floor_number: Optional[int] = None
    built_year: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    postal_code: Optional[str] = None
    is_furnished: bool
    has_parking: bool
    parking_spaces: int
    pet_friendly: bool
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    property_type_id: uuid.UUID
    location_id: uuid.UUID
    agent_id: Optional[uuid.UUID] = None
    inquiries_count: int
    reviews_count: int
    amenities: List[AmenitySummary] = Field(default_factory=list)
    images: List[PropertyImageResponse] = Field(default_factory=list)
    updated_at: datetime


class PropertySearchFilters(BaseModel):
    """Schema for public property search filters."""

    keyword: Optional[str] = Field(None, max_length=255, description="Matches title, description and address")
    property_type_id: Optional[uuid.UUID] = None
    location_id: Optional[uuid.UUID] = None
    listing_type: Optional[ListingType] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0, description="Minimum bedrooms")
    bathrooms: Optional[int] = Field(None, ge=0, description="Minimum bathrooms")
    featured: Optional[bool] = None
    sort: str = Field("latest", pattern="^(latest|price_asc|price_desc)$")

    @model_validator(mode='after')
    def validate_price_range(self):
        """Validate that min_price is not greater than max_price."""
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("Minimum price cannot be greater than maximum price")
        return self


class DailyViews(BaseModel):
    day: date
    views: int


class PropertyViewStats(BaseModel):
    property_id: uuid.UUID
    total_views: int
    days: List[DailyViews]


# Favorites

class FavoriteToggleRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)


class FavoriteToggleResponse(BaseModel):
    is_favorited: bool
    favorites_count: int


class FavoriteResponse(ORMModel):
    id: uuid.UUID
    notes: Optional[str] = None
    listing: PropertySummary
    created_at: datetime


# Tours

class TourRequestCreate(BaseModel):
    """Public request to visit a listing."""

    property_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    tour_date: date = Field(..., description="Requested date; must be after today")
    tour_time: str = Field(..., description="HH:MM", examples=["14:30"])
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return ValidationUtils.validate_email_address(v)

    @field_validator('tour_date')
    @classmethod
    def validate_date(cls, v):
        if v <= date.today():
            raise ValueError("Tour date must be after today")
        return v

    @field_validator('tour_time')
    @classmethod
    def validate_time(cls, v):
        return ValidationUtils.validate_time(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class TourStatusUpdate(BaseModel):
    status: TourStatus


class TourResponse(ORMModel):
    id: uuid.UUID
    property_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    name: str
    email: str
    phone: Optional[str] = None
    tour_date: date
    tour_time: str
    message: Optional[str] = None
    status: str
    created_at: datetime
