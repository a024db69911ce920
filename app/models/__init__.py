"""
Database models for the Realty CMS.
Importing this package registers every table on Base.metadata.
"""

from app.models.associations import user_roles, role_permissions, property_amenities, post_tags
from app.models.user import User, Role, Permission
from app.models.team import Team, TeamMembership, TeamInvitation, TeamRole
from app.models.catalog import PropertyType, Location, Amenity, PropertyCategory, LocationType
from app.models.agent import Agent
from app.models.property import (
    Property,
    PropertyStatus,
    ListingType,
    Favorite,
    PropertyView,
    PropertyTour,
    TourStatus,
)
from app.models.image import PropertyImage, ImageKind
from app.models.inquiry import (
    Inquiry,
    InquiryType,
    InquiryStatus,
    ContactMethod,
    ContactInquiry,
    ContactInquiryType,
    ContactInquiryStatus,
)
from app.models.media import Media, MediaType
from app.models.blog import Category, Tag, Post, PostStatus, Comment, CommentStatus
from app.models.message import Message, MessageableType
from app.models.review import Review, ReviewableType
from app.models.seo import SeoSetting, SeoValueType

__all__ = [
    "user_roles",
    "role_permissions",
    "property_amenities",
    "post_tags",
    "User",
    "Role",
    "Permission",
    "Team",
    "TeamMembership",
    "TeamInvitation",
    "TeamRole",
    "PropertyType",
    "Location",
    "Amenity",
    "PropertyCategory",
    "LocationType",
    "Agent",
    "Property",
    "PropertyStatus",
    "ListingType",
    "Favorite",
    "PropertyView",
    "PropertyTour",
    "TourStatus",
    "PropertyImage",
    "ImageKind",
    "Inquiry",
    "InquiryType",
    "InquiryStatus",
    "ContactMethod",
    "ContactInquiry",
    "ContactInquiryType",
    "ContactInquiryStatus",
    "Media",
    "MediaType",
    "Category",
    "Tag",
    "Post",
    "PostStatus",
    "Comment",
    "CommentStatus",
    "Message",
    "MessageableType",
    "Review",
    "ReviewableType",
    "SeoSetting",
    "SeoValueType",
]
