"""
FastAPI dependency injection utilities for authentication, permissions and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Callable, Optional, Type, TypeVar
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.user import User
from app.permissions import ADMIN_PANEL_PERMISSION
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.utils.exceptions import (
    UnauthorizedError,
    InactiveUserError,
    InsufficientPermissionsError
)
import logging

logger = logging.getLogger(__name__)

ServiceType = TypeVar("ServiceType")

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session

    Returns:
        AuthService instance
    """
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session

    Returns:
        PropertyService instance
    """
    return PropertyService(db)


def get_service(service_class: Type[ServiceType]) -> Callable[..., ServiceType]:
    """Dependency building a service of the given class on the request's session."""

    async def service_dependency(db: AsyncSession = Depends(get_db)) -> ServiceType:
        return service_class(db)

    return service_dependency


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer credentials
        auth_service: Authentication service

    Returns:
        Current User object

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        TokenExpiredError: If token is expired
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get current active user (additional check for user status).

    Raises:
        InactiveUserError: If user account is inactive
    """
    if not current_user.is_active:
        raise InactiveUserError()

    return current_user


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if token is provided and valid, otherwise return None.
    Used by public endpoints that adapt to a signed-in visitor.
    """
    if not credentials:
        return None

    try:
        user = await auth_service.get_current_user(credentials.credentials)
    except UnauthorizedError as e:
        logger.debug(f"Ignoring invalid token on public endpoint: {e.detail}")
        return None
    return user if user.is_active else None


def require_permission(*permission_names: str):
    """
    Create a dependency that requires every listed permission.

    Args:
        permission_names: Permission names from the role matrix

    Returns:
        Dependency function returning the current user
    """
    async def permission_dependency(
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        missing = [name for name in permission_names if not current_user.has_permission(name)]
        if missing:
            logger.warning(f"User {current_user.id} lacks permissions: {', '.join(missing)}")
            raise InsufficientPermissionsError()
        return current_user

    return permission_dependency


def require_admin(*permission_names: str):
    """Admin-area dependency: the admin panel permission plus the listed ones."""
    return require_permission(ADMIN_PANEL_PERMISSION, *permission_names)


def get_client_ip(request: Request) -> Optional[str]:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
