"""
Property model for sale and rental listings.
Handles listing data, pricing, location, classification and engagement counters.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Boolean, Date, ForeignKey, Index, Uuid, UniqueConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.associations import property_amenities
from app.models.catalog import PropertyType, Location, Amenity
from app.models.agent import Agent
from decimal import Decimal
from datetime import date
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.image import PropertyImage
    from app.models.user import User


class ListingType(str, enum.Enum):
    """Whether the property is offered for sale or for rent."""
    SALE = "sale"
    RENT = "rent"


class PropertyStatus(str, enum.Enum):
    """Lifecycle status of a listing. Only available listings are public."""
    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"
    PENDING = "pending"
    DRAFT = "draft"


class Property(Base):
    """
    Property listing.
    Belongs to a property type, a location and an agent; has amenities and images.
    """

    __tablename__ = "properties"

    # Basic listing information
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    listing_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        index=True,
        comment="sale or rent"
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PropertyStatus.AVAILABLE.value,
        index=True
    )

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), nullable=False, index=True)
    monthly_rent: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="BDT")

    # Specifications
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_rooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    area_sqft: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    land_area_sqft: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    floor_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    built_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Location
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=10, scale=8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=11, scale=8), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Features
    is_furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parking_spaces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pet_friendly: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    # SEO
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    meta_keywords: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Classification
    property_type_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("property_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    agent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Engagement counters
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorites_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inquiries_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rating: Mapped[Decimal] = mapped_column(Numeric(precision=3, scale=2), nullable=False, default=Decimal("0"))

    # Relationships
    property_type: Mapped[PropertyType] = relationship("PropertyType", lazy="selectin")
    location: Mapped[Location] = relationship("Location", lazy="selectin")
    agent: Mapped[Optional[Agent]] = relationship("Agent", lazy="selectin")
    amenities: Mapped[List[Amenity]] = relationship(
        "Amenity",
        secondary=property_amenities,
        lazy="selectin",
        order_by="Amenity.sort_order"
    )
    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="listing",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.sort_order"
    )

    # Dependent rows removed with the listing
    favorites: Mapped[List["Favorite"]] = relationship(
        "Favorite", back_populates="listing", cascade="all, delete-orphan"
    )
    property_views: Mapped[List["PropertyView"]] = relationship(
        "PropertyView", cascade="all, delete-orphan"
    )
    tours: Mapped[List["PropertyTour"]] = relationship(
        "PropertyTour", back_populates="listing", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_property_status_listing", "status", "listing_type"),
        Index("idx_property_status_created", "status", "created_at"),
        Index("idx_property_price_bedrooms", "price", "bedrooms"),
    )

    # Set per request for the viewing user, not stored
    is_favorited = False

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0] if self.images else None

    @property
    def is_available(self) -> bool:
        return self.status == PropertyStatus.AVAILABLE.value

    def is_managed_by(self, user: "User") -> bool:
        """Admins manage every listing; agents only listings on their linked profile."""
        if user.is_admin:
            return True
        if not user.is_agent:
            return user.has_permission("edit properties")
        profile = user.agent_profile
        return profile is not None and self.agent_id == profile.id

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title}, status={self.status})>"


class Favorite(Base):
    """A user's saved listing."""

    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "property_id", name="uq_favorite_user_property"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    listing: Mapped[Property] = relationship("Property", back_populates="favorites", lazy="selectin")


class PropertyView(Base):
    """One recorded view of a listing, used for daily view statistics."""

    __tablename__ = "property_views"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    viewed_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)


class TourStatus(str, enum.Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PropertyTour(Base):
    """Request to visit a listing on a given date and time."""

    __tablename__ = "property_tours"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tour_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    tour_time: Mapped[str] = mapped_column(String(5), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=TourStatus.REQUESTED.value)

    listing: Mapped[Property] = relationship("Property", back_populates="tours", lazy="selectin")
