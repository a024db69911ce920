"""
Repository layer for data access operations.
Each repository wraps one model's queries; services hold the business rules.
"""

from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository, RoleRepository, PermissionRepository
from app.repositories.property import PropertyRepository, FavoriteRepository, TourRepository
from app.repositories.image import ImageRepository
from app.repositories.inquiry import InquiryRepository, ContactInquiryRepository
from app.repositories.blog import PostRepository, CommentRepository
from app.repositories.message import MessageRepository
from app.repositories.review import ReviewRepository
from app.repositories.team import TeamRepository
from app.repositories.media import MediaRepository
from app.repositories.seo import SeoSettingRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RoleRepository",
    "PermissionRepository",
    "PropertyRepository",
    "FavoriteRepository",
    "TourRepository",
    "ImageRepository",
    "InquiryRepository",
    "ContactInquiryRepository",
    "PostRepository",
    "CommentRepository",
    "MessageRepository",
    "ReviewRepository",
    "TeamRepository",
    "MediaRepository",
    "SeoSettingRepository",
]
