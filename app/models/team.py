"""
Team models: teams, memberships and pending invitations.
"""

from sqlalchemy import String, Boolean, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.user import User
import enum
import uuid
from typing import List, Optional


class TeamRole(str, enum.Enum):
    """Roles a member can hold inside a team."""
    MEMBER = "member"
    ADMIN = "admin"
    EDITOR = "editor"


class Team(Base):
    """Group of users. Every user owns a personal team created at registration."""

    __tablename__ = "teams"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Team owner"
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    personal_team: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    language: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    owner: Mapped[User] = relationship("User", lazy="selectin")

    memberships: Mapped[List["TeamMembership"]] = relationship(
        "TeamMembership",
        back_populates="team",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    invitations: Mapped[List["TeamInvitation"]] = relationship(
        "TeamInvitation",
        back_populates="team",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    def is_owner(self, user: User) -> bool:
        return self.user_id == user.id

    def membership_for(self, user_id: uuid.UUID) -> Optional["TeamMembership"]:
        for membership in self.memberships:
            if membership.user_id == user_id:
                return membership
        return None

    def has_user(self, user: User) -> bool:
        """Owners count as members even without a membership row."""
        return self.is_owner(user) or self.membership_for(user.id) is not None

    def can_manage(self, user: User) -> bool:
        if self.is_owner(user):
            return True
        membership = self.membership_for(user.id)
        return membership is not None and membership.role == TeamRole.ADMIN.value


class TeamMembership(Base):
    """Pivot between teams and users carrying the member's team role."""

    __tablename__ = "team_user"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_user"),)

    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=TeamRole.MEMBER.value)

    team: Mapped[Team] = relationship("Team", back_populates="memberships")
    user: Mapped[User] = relationship("User", lazy="selectin")


class TeamInvitation(Base):
    """Pending invitation for an email address to join a team."""

    __tablename__ = "team_invitations"

    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=TeamRole.MEMBER.value)

    team: Mapped[Team] = relationship("Team", back_populates="invitations")
