"""
Pydantic schemas for request/response validation.
"""

# Envelope
from .common import (
    APIResponse,
    PaginatedResponse,
    PaginationMeta,
    success_response,
    paginated_response
)
from .error import APIErrorResponse

# Authentication
from .auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    TokenResponse,
    RefreshTokenRequest,
    AccessTokenResponse
)

# Users and roles
from .user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserSummary,
    CurrentUserResponse,
    ProfileUpdate,
    AssignRolesRequest
)
from .role import RoleCreate, RoleUpdate, RoleResponse, PermissionResponse

# Properties
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySummary,
    PropertySearchFilters
)
from .image import PropertyImageResponse, PropertyImageUpdate

__all__ = [
    "APIResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "success_response",
    "paginated_response",
    "APIErrorResponse",

    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "TokenResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",

    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "CurrentUserResponse",
    "ProfileUpdate",
    "AssignRolesRequest",
    "RoleCreate",
    "RoleUpdate",
    "RoleResponse",
    "PermissionResponse",

    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertySummary",
    "PropertySearchFilters",
    "PropertyImageResponse",
    "PropertyImageUpdate"
]
