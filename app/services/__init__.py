"""
Service layer for business logic implementation.
Services validate input against the database, enforce ownership rules and
drive the repositories.
"""

from .auth import AuthService
from .user import UserService, RoleService
from .catalog import PropertyTypeService, LocationService, AmenityService, CategoryService, TagService
from .agent import AgentService
from .property import PropertyService
from .image import ImageService
from .favorite import FavoriteService
from .tour import TourService
from .inquiry import InquiryService, ContactInquiryService
from .blog import PostService
from .comment import CommentService
from .media import MediaService
from .message import MessageService
from .review import ReviewService
from .team import TeamService
from .seo import SeoService
from .dashboard import DashboardService, HomeService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "UserService",
    "RoleService",
    "PropertyTypeService",
    "LocationService",
    "AmenityService",
    "CategoryService",
    "TagService",
    "AgentService",
    "PropertyService",
    "ImageService",
    "FavoriteService",
    "TourService",
    "InquiryService",
    "ContactInquiryService",
    "PostService",
    "CommentService",
    "MediaService",
    "MessageService",
    "ReviewService",
    "TeamService",
    "SeoService",
    "DashboardService",
    "HomeService",
    "ErrorHandlerService",
]
