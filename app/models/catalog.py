"""
Reference catalog models used to classify listings: property types, locations and amenities.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from decimal import Decimal
import enum
from typing import Optional


class SluggedMixin:
    """Columns shared by the name/slug/active/sort-order catalog tables."""

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PropertyCategory(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class LocationType(str, enum.Enum):
    CITY = "city"
    AREA = "area"
    NEIGHBORHOOD = "neighborhood"


class PropertyType(SluggedMixin, Base):
    """Kind of property, e.g. apartment, villa, office."""

    __tablename__ = "property_types"

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    category: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PropertyCategory.RESIDENTIAL.value,
        comment="residential or commercial"
    )


class Location(SluggedMixin, Base):
    """City, area or neighborhood a listing belongs to."""

    __tablename__ = "locations"

    type: Mapped[str] = mapped_column(String(32), nullable=False, default=LocationType.CITY.value)
    state: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[str] = mapped_column(String(255), nullable=False, default="Bangladesh")
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=10, scale=8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=11, scale=8), nullable=True)


class Amenity(SluggedMixin, Base):
    """Feature a listing can offer, e.g. gym, pool, generator."""

    __tablename__ = "amenities"

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
