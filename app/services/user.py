"""
User administration and role management services.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository, RoleRepository, PermissionRepository
from app.models.user import User, Role
from app.permissions import RoleName, SYSTEM_ROLES
from app.schemas.user import UserCreate, UserUpdate
from app.schemas.role import RoleCreate, RoleUpdate
from app.utils.exceptions import (
    APIException,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    BadRequestError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Admin management of user accounts and their roles."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.role_repo = RoleRepository(db_session)

    async def list_users(
        self,
        search: Optional[str],
        role: Optional[str],
        page: int,
        per_page: int
    ) -> Tuple[List[User], int]:
        return await self.user_repo.search_users(search, role, page, per_page)

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def _resolve_roles(self, names: List[str]) -> List[Role]:
        """
        Roles for the given names.

        Raises:
            ValidationError: If any name is not a known role
        """
        wanted = list(dict.fromkeys(name.strip().lower() for name in names if name and name.strip()))
        roles = await self.role_repo.get_by_names(wanted)
        missing = sorted(set(wanted) - {role.name for role in roles})
        if missing:
            raise ValidationError.for_field("roles", f"The selected roles are invalid: {', '.join(missing)}.")
        return roles

    async def create_user(self, data: UserCreate) -> User:
        """
        Create a user account. Without explicit roles the user role is assigned.

        Raises:
            ValidationError: If the email is taken or a role does not exist
        """
        if await self.user_repo.email_taken(data.email):
            raise ValidationError.for_field("email", "The email has already been taken.")

        roles = await self._resolve_roles(data.roles or [RoleName.USER.value])

        try:
            user = User(name=data.name, email=data.email, is_active=data.is_active)
            user.set_password(data.password)
            user.roles = roles
            created = await self.user_repo.save(user)
            logger.info(f"User created: {created.email} (ID: {created.id})")
            return created
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise BadRequestError(f"Failed to create user: {str(e)}")

    async def update_user(self, user_id: uuid.UUID, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        update_data = data.model_dump(exclude_unset=True)
        update_data = {key: value for key, value in update_data.items() if value is not None}

        email = update_data.pop("email", None)
        if email and email != user.email:
            if await self.user_repo.email_taken(email, exclude_user_id=user.id):
                raise ValidationError.for_field("email", "The email has already been taken.")
            user.email = email

        password = update_data.pop("password", None)
        if password:
            user.set_password(password)

        role_names = update_data.pop("roles", None)
        if role_names is not None:
            user.roles = await self._resolve_roles(role_names)

        updated = await self.user_repo.update(user, update_data)
        logger.info(f"User updated: {user_id}")
        return updated

    async def delete_user(self, user_id: uuid.UUID, current_user: User) -> None:
        """
        Delete an account.

        Raises:
            ForbiddenError: If the admin tries to delete their own account
        """
        if user_id == current_user.id:
            raise ForbiddenError("You cannot delete your own account.")
        user = await self.get_user(user_id)
        await self.user_repo.delete(user)
        logger.info(f"User deleted by {current_user.email}: {user_id}")

    async def assign_roles(self, user_id: uuid.UUID, role_names: List[str]) -> User:
        """Replace the user's roles with exactly the named roles."""
        user = await self.get_user(user_id)
        user.roles = await self._resolve_roles(role_names)
        updated = await self.user_repo.save(user)
        logger.info(f"Roles for user {user_id} set to {updated.role_names}")
        return updated


class RoleService:
    """Admin CRUD over roles and their permission sets."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.role_repo = RoleRepository(db_session)
        self.permission_repo = PermissionRepository(db_session)

    async def list_roles(self) -> List[Role]:
        return await self.role_repo.list_all()

    async def list_permissions(self):
        return await self.permission_repo.list_all()

    async def get_role(self, role_id: uuid.UUID) -> Role:
        role = await self.role_repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role", str(role_id))
        return role

    async def _resolve_permissions(self, names: List[str]):
        wanted = list(dict.fromkeys(name.strip() for name in names if name and name.strip()))
        permissions = await self.permission_repo.get_by_names(wanted)
        missing = sorted(set(wanted) - {permission.name for permission in permissions})
        if missing:
            raise ValidationError.for_field(
                "permissions",
                f"The selected permissions are invalid: {', '.join(missing)}."
            )
        return permissions

    async def create_role(self, data: RoleCreate) -> Role:
        if await self.role_repo.field_taken("name", data.name):
            raise ValidationError.for_field("name", "The name has already been taken.")

        role = Role(name=data.name)
        role.permissions = await self._resolve_permissions(data.permissions)
        created = await self.role_repo.save(role)
        logger.info(f"Role created: {created.name}")
        return created

    async def update_role(self, role_id: uuid.UUID, data: RoleUpdate) -> Role:
        role = await self.get_role(role_id)

        if data.name is not None and data.name != role.name:
            if role.name in SYSTEM_ROLES:
                raise ForbiddenError("Built-in roles cannot be renamed.")
            if await self.role_repo.field_taken("name", data.name, exclude_id=role.id):
                raise ValidationError.for_field("name", "The name has already been taken.")
            role.name = data.name

        if data.permissions is not None:
            role.permissions = await self._resolve_permissions(data.permissions)

        updated = await self.role_repo.save(role)
        logger.info(f"Role updated: {updated.name}")
        return updated

    async def delete_role(self, role_id: uuid.UUID) -> None:
        """
        Delete a custom role.

        Raises:
            ForbiddenError: For the seeded admin/agent/moderator/user roles
        """
        role = await self.get_role(role_id)
        if role.name in SYSTEM_ROLES:
            raise ForbiddenError("Built-in roles cannot be deleted.")
        await self.role_repo.delete(role)
        logger.info(f"Role deleted: {role.name}")
