"""
Reference data seeding: property types, locations, amenities, blog categories,
tags and default SEO settings.

Rows are matched by slug (or key for SEO settings); existing rows are kept as
they are so admin edits survive a re-seed.
"""

from typing import Any, Dict, List, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import Base
from app.models.catalog import PropertyType, Location, Amenity, PropertyCategory, LocationType
from app.models.blog import Category, Tag
from app.models.seo import SeoSetting, SeoValueType
from app.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)


PROPERTY_TYPES: List[Dict[str, Any]] = [
    {"name": "Apartment", "icon": "building", "description": "Self-contained unit in a residential building"},
    {"name": "House", "icon": "home", "description": "Detached single-family home"},
    {"name": "Townhouse", "icon": "buildings", "description": "Multi-floor home sharing walls with neighbours"},
    {"name": "Condominium", "icon": "building-2", "description": "Individually owned unit with shared amenities"},
    {"name": "Villa", "icon": "castle", "description": "Spacious home with private grounds"},
    {"name": "Studio", "icon": "square", "description": "Single open-plan living space"},
    {"name": "Duplex", "icon": "building-arch", "description": "Two units in one building"},
    {"name": "Penthouse", "icon": "building-skyscraper", "description": "Top-floor luxury apartment"},
    {"name": "Loft", "icon": "warehouse", "description": "Converted open space with high ceilings"},
    {
        "name": "Commercial",
        "icon": "briefcase",
        "description": "Office, retail or mixed-use space",
        "category": PropertyCategory.COMMERCIAL.value,
    },
]

LOCATIONS: List[Dict[str, Any]] = [
    {"name": "New York City", "state": "New York", "latitude": 40.7128, "longitude": -74.0060},
    {"name": "Los Angeles", "state": "California", "latitude": 34.0522, "longitude": -118.2437},
    {"name": "Chicago", "state": "Illinois", "latitude": 41.8781, "longitude": -87.6298},
    {"name": "Houston", "state": "Texas", "latitude": 29.7604, "longitude": -95.3698},
    {"name": "Miami", "state": "Florida", "latitude": 25.7617, "longitude": -80.1918},
    {"name": "San Francisco", "state": "California", "latitude": 37.7749, "longitude": -122.4194},
    {"name": "Seattle", "state": "Washington", "latitude": 47.6062, "longitude": -122.3321},
    {"name": "Boston", "state": "Massachusetts", "latitude": 42.3601, "longitude": -71.0589},
    {"name": "Manhattan", "state": "New York", "type": LocationType.NEIGHBORHOOD.value},
    {"name": "Brooklyn", "state": "New York", "type": LocationType.NEIGHBORHOOD.value},
    {"name": "Beverly Hills", "state": "California", "type": LocationType.NEIGHBORHOOD.value},
    {"name": "Hollywood", "state": "California", "type": LocationType.NEIGHBORHOOD.value},
    {"name": "South Beach", "state": "Florida", "type": LocationType.NEIGHBORHOOD.value},
    {"name": "Westchester County", "state": "New York", "type": LocationType.AREA.value},
    {"name": "Orange County", "state": "California", "type": LocationType.AREA.value},
]

AMENITIES: Dict[str, List[Dict[str, str]]] = {
    "interior": [
        {"name": "Air Conditioning", "icon": "snowflake"},
        {"name": "Hardwood Floors", "icon": "tree"},
        {"name": "Walk-in Closet", "icon": "hanger"},
        {"name": "Fireplace", "icon": "flame"},
        {"name": "High Ceilings", "icon": "arrow-up"},
        {"name": "Updated Kitchen", "icon": "chef-hat"},
        {"name": "Granite Countertops", "icon": "square"},
        {"name": "Stainless Steel Appliances", "icon": "tools-kitchen"},
    ],
    "exterior": [
        {"name": "Swimming Pool", "icon": "pool"},
        {"name": "Garden", "icon": "flower"},
        {"name": "Balcony", "icon": "building-bridge"},
        {"name": "Patio", "icon": "umbrella"},
        {"name": "Garage", "icon": "car"},
        {"name": "Deck", "icon": "stairs"},
    ],
    "building": [
        {"name": "Gym/Fitness Center", "icon": "barbell"},
        {"name": "Concierge", "icon": "user-tie"},
        {"name": "Doorman", "icon": "door"},
        {"name": "Elevator", "icon": "elevator"},
        {"name": "Laundry Room", "icon": "washing-machine"},
        {"name": "Storage Unit", "icon": "box"},
        {"name": "Rooftop Access", "icon": "building-skyscraper"},
    ],
    "technology": [
        {"name": "High-Speed Internet", "icon": "wifi"},
        {"name": "Security System", "icon": "shield-check"},
        {"name": "Smart Home Features", "icon": "smart-home"},
        {"name": "Video Intercom", "icon": "video"},
    ],
    "location": [
        {"name": "Near Public Transport", "icon": "train"},
        {"name": "Shopping Nearby", "icon": "shopping-bag"},
        {"name": "Near Schools", "icon": "school"},
        {"name": "Park View", "icon": "tree-pine"},
        {"name": "Waterfront", "icon": "waves"},
    ],
}

CATEGORIES = [
    "Buying Guides",
    "Selling Tips",
    "Market Trends",
    "Home Improvement",
    "Interior Design",
    "Investment",
    "Finance",
    "Lifestyle",
    "Neighborhood Spotlights",
    "Company News",
]

TAGS = [
    "first-time-buyers", "mortgage", "renting", "luxury", "commercial", "investment",
    "renovation", "staging", "market-report", "tips", "guide", "best-practices",
]

TAG_COLORS = [
    "#3B82F6", "#EF4444", "#10B981", "#F59E0B", "#8B5CF6", "#F97316",
    "#06B6D4", "#84CC16", "#EC4899", "#6B7280", "#14B8A6", "#F472B6",
]

SEO_DEFAULTS: List[Dict[str, Any]] = [
    {"key": "site_name", "value": "Realty CMS", "group": "general", "description": "Site name used in titles"},
    {"key": "site_tagline", "value": "Find your next home", "group": "general"},
    {
        "key": "meta_title",
        "value": "Realty CMS - Properties for sale and rent",
        "group": "meta",
        "description": "Default page title",
    },
    {
        "key": "meta_description",
        "value": "Browse apartments, houses and commercial listings with verified agents.",
        "type": SeoValueType.TEXTAREA.value,
        "group": "meta",
    },
    {"key": "meta_keywords", "value": "real estate, property, apartments, houses", "group": "meta"},
    {"key": "og_image", "value": None, "group": "social", "description": "Default Open Graph image URL"},
    {"key": "twitter_handle", "value": None, "group": "social"},
    {"key": "robots_index", "value": "true", "type": SeoValueType.BOOLEAN.value, "group": "advanced"},
    {"key": "sitemap_enabled", "value": "true", "type": SeoValueType.BOOLEAN.value, "group": "advanced"},
    {"key": "google_analytics_id", "value": None, "group": "analytics"},
]


async def _insert_missing(db: AsyncSession, model: Type[Base], key_field: str, rows: List[Dict[str, Any]]) -> int:
    """Insert rows whose key is not present yet; returns the number inserted."""
    column = getattr(model, key_field)
    keys = [row[key_field] for row in rows]
    result = await db.execute(select(column).where(column.in_(keys)))
    existing = set(result.scalars().all())

    created = 0
    for row in rows:
        if row[key_field] in existing:
            continue
        db.add(model(**row))
        existing.add(row[key_field])
        created += 1
    return created


def _slugged(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {**entry, "slug": ValidationUtils.slugify(entry["name"]), "is_active": True, "sort_order": index + 1}
        for index, entry in enumerate(entries)
    ]


async def seed_reference_data(db: AsyncSession) -> Dict[str, int]:
    """
    Insert missing reference rows.

    Returns:
        Number of rows created per resource
    """
    amenities = [
        {**amenity, "category": category}
        for category, entries in AMENITIES.items()
        for amenity in entries
    ]
    tags = [
        {"name": name, "color": TAG_COLORS[index % len(TAG_COLORS)]}
        for index, name in enumerate(TAGS)
    ]
    seo = [
        {"type": SeoValueType.TEXT.value, "is_active": True, "sort_order": index, **setting}
        for index, setting in enumerate(SEO_DEFAULTS)
    ]

    summary = {
        "property_types": await _insert_missing(db, PropertyType, "slug", _slugged(PROPERTY_TYPES)),
        "locations": await _insert_missing(db, Location, "slug", _slugged(LOCATIONS)),
        "amenities": await _insert_missing(db, Amenity, "slug", _slugged(amenities)),
        "categories": await _insert_missing(db, Category, "slug", _slugged([{"name": name} for name in CATEGORIES])),
        "tags": await _insert_missing(db, Tag, "slug", _slugged(tags)),
        "seo_settings": await _insert_missing(db, SeoSetting, "key", seo),
    }
    await db.commit()

    logger.info("Reference data seeded: " + ", ".join(f"{name}={count}" for name, count in summary.items()))
    return summary
