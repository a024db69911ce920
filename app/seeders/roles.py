"""
Role and permission seeding from the static matrix in app.permissions.
"""

from typing import Dict, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.user import User, Role, Permission
from app.models.team import Team
from app.permissions import PERMISSIONS, ROLE_PERMISSIONS, RoleName
from app.repositories.user import UserRepository
import logging

logger = logging.getLogger(__name__)


async def seed_roles_and_permissions(db: AsyncSession, reset: bool = False) -> Dict[str, int]:
    """
    Bring the role and permission tables in line with the matrix.

    Missing permissions and roles are inserted and missing grants attached.
    Grants outside the matrix are left alone unless ``reset`` is set, in which
    case every matrix role ends up with exactly its matrix permissions.

    Args:
        db: Database session
        reset: Replace role permissions instead of only adding

    Returns:
        Counts of created permissions, created roles and changed grants
    """
    summary = {"permissions_created": 0, "roles_created": 0, "grants_changed": 0}

    result = await db.execute(select(Permission))
    permissions = {permission.name: permission for permission in result.scalars().all()}
    for name in PERMISSIONS:
        if name not in permissions:
            permission = Permission(name=name)
            db.add(permission)
            permissions[name] = permission
            summary["permissions_created"] += 1
    await db.flush()

    result = await db.execute(select(Role))
    roles = {role.name: role for role in result.scalars().all()}

    for role_name, granted in ROLE_PERMISSIONS.items():
        role = roles.get(role_name)
        if role is None:
            role = Role(name=role_name, permissions=[])
            db.add(role)
            roles[role_name] = role
            summary["roles_created"] += 1

        wanted = [permissions[name] for name in dict.fromkeys(granted)]
        current = {permission.name for permission in role.permissions}

        if reset:
            if current != {permission.name for permission in wanted}:
                summary["grants_changed"] += len(current.symmetric_difference(p.name for p in wanted))
                role.permissions = wanted
        else:
            missing = [permission for permission in wanted if permission.name not in current]
            if missing:
                role.permissions = list(role.permissions) + missing
                summary["grants_changed"] += len(missing)

    await db.commit()
    logger.info(
        f"Roles seeded: {summary['permissions_created']} permissions and "
        f"{summary['roles_created']} roles created, {summary['grants_changed']} grants changed"
    )
    return summary


async def ensure_admin_user(
    db: AsyncSession,
    email: str,
    name: str,
    password: str,
    reset_password: bool = False
) -> Tuple[User, bool]:
    """
    Make sure an account with the admin role exists for the email.

    An existing account gains the admin role (and a new password only with
    ``reset_password``); otherwise a new account with a personal team is created.

    Returns:
        Tuple of (user, whether it was created)

    Raises:
        RuntimeError: If the admin role has not been seeded
    """
    email = User.validate_email_format(email)
    result = await db.execute(select(Role).where(Role.name == RoleName.ADMIN.value))
    admin_role: Optional[Role] = result.scalars().first()
    if admin_role is None:
        raise RuntimeError("Admin role is missing; seed roles first")

    user_repo = UserRepository(db)
    user = await user_repo.get_by_email(email)
    created = user is None

    if created:
        user = User(name=name, email=email, is_active=True, roles=[admin_role])
        user.set_password(password)
        db.add(user)
        await db.flush()

        team = Team(user_id=user.id, name=f"{user.first_name}'s Team", personal_team=True)
        db.add(team)
        await db.flush()
        user.current_team_id = team.id
    else:
        if not user.has_role(RoleName.ADMIN.value):
            user.roles = list(user.roles) + [admin_role]
        if reset_password:
            user.set_password(password)
        user.is_active = True

    await db.commit()
    logger.info(f"Admin account {'created' if created else 'updated'}: {email}")
    return await user_repo.get_by_id(user.id), created
