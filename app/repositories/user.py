"""
User, role and permission repositories.
Provides user lookups, searches and role/permission resolution by name.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from app.repositories.base import BaseRepository
from app.models.associations import user_roles
from app.models.user import User, Role, Permission
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication and authorization support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address (matched case-insensitively)

        Returns:
            User instance if found, None otherwise
        """
        try:
            query = (
                select(User)
                .where(func.lower(User.email) == email.lower().strip())
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def email_taken(self, email: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
        """Whether another account already uses the email address."""
        query = select(func.count(User.id)).where(func.lower(User.email) == email.lower().strip())
        if exclude_user_id:
            query = query.where(User.id != exclude_user_id)
        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def search_users(
        self,
        search_term: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[User], int]:
        """
        Search users by email or name, optionally limited to a role.

        Returns:
            Tuple of (users list, total count)
        """
        query = select(User)

        if search_term:
            search_pattern = f"%{search_term.strip()}%"
            query = query.where(or_(User.name.ilike(search_pattern), User.email.ilike(search_pattern)))

        if role:
            query = (
                query.join(user_roles, user_roles.c.user_id == User.id)
                .join(Role, Role.id == user_roles.c.role_id)
                .where(Role.name == role)
            )

        query = query.order_by(User.created_at.desc())
        users, total = await self.paginate(query, page, per_page)
        logger.debug(f"User search for '{search_term}' returned {len(users)} of {total}")
        return users, total


class RoleRepository(BaseRepository[Role]):
    """Roles resolved by name for assignment and seeding."""

    def __init__(self, db: AsyncSession):
        super().__init__(Role, db)

    async def get_by_name(self, name: str) -> Optional[Role]:
        return await self.get_by_field("name", name)

    async def get_by_names(self, names: List[str]) -> List[Role]:
        if not names:
            return []
        result = await self.db.execute(select(Role).where(Role.name.in_(names)))
        return list(result.scalars().all())

    async def list_all(self) -> List[Role]:
        result = await self.db.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def count_users(self, role_id: uuid.UUID) -> int:
        query = select(func.count()).select_from(user_roles).where(user_roles.c.role_id == role_id)
        return (await self.db.execute(query)).scalar() or 0


class PermissionRepository(BaseRepository[Permission]):
    """Named permissions."""

    def __init__(self, db: AsyncSession):
        super().__init__(Permission, db)

    async def get_by_names(self, names: List[str]) -> List[Permission]:
        if not names:
            return []
        result = await self.db.execute(select(Permission).where(Permission.name.in_(names)))
        return list(result.scalars().all())

    async def list_all(self) -> List[Permission]:
        result = await self.db.execute(select(Permission).order_by(Permission.name))
        return list(result.scalars().all())
