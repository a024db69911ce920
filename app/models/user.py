"""
User, role and permission models.
Handles user accounts and the role/permission tables the authorization layer reads.
"""

from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.associations import user_roles, role_permissions
from app.permissions import RoleName
from app.utils.auth import hash_password, verify_password
from email_validator import validate_email, EmailNotValidError
import uuid
from datetime import datetime
from typing import List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.agent import Agent


class Permission(Base):
    """Named capability, e.g. "edit properties"."""

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(125),
        unique=True,
        nullable=False,
        index=True,
        comment="Permission name checked by route dependencies"
    )

    def __repr__(self) -> str:
        return f"<Permission(name={self.name})>"


class Role(Base):
    """Named group of permissions assigned to users."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(125), unique=True, nullable=False, index=True)

    permissions: Mapped[List[Permission]] = relationship(
        "Permission",
        secondary=role_permissions,
        lazy="selectin",
        order_by="Permission.name"
    )

    @property
    def permission_names(self) -> List[str]:
        return [permission.name for permission in self.permissions]

    def __repr__(self) -> str:
        return f"<Role(name={self.name})>"


class User(Base):
    """
    User model for authentication and authorization.
    Roles are attached through the user_roles pivot; permissions come from roles.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    email_verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Plain column: teams also reference users, so no FK cycle here
    current_team_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="Team the user is currently working in"
    )

    # Relationships
    roles: Mapped[List[Role]] = relationship(
        "Role",
        secondary=user_roles,
        lazy="selectin",
        order_by="Role.name"
    )

    agent_profile: Mapped[Optional["Agent"]] = relationship(
        "Agent",
        back_populates="user",
        uselist=False,
        lazy="selectin"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    def set_password(self, password: str) -> None:
        """Hash and store a new password."""
        self.hashed_password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return verify_password(password, self.hashed_password)

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]

    @property
    def permission_names(self) -> Set[str]:
        """All permissions granted through the user's roles."""
        return {permission.name for role in self.roles for permission in role.permissions}

    def has_role(self, role_name: str) -> bool:
        return role_name in self.role_names

    def has_permission(self, permission_name: str) -> bool:
        return permission_name in self.permission_names

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.has_role(RoleName.ADMIN.value)

    @property
    def is_agent(self) -> bool:
        """Agents without admin rights are limited to their own listings."""
        return self.has_role(RoleName.AGENT.value) and not self.is_admin

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""
