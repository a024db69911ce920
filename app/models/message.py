"""
Message model: contact between users (or guests) about a listing or an agent.
"""

from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.user import User
from datetime import datetime
import enum
import uuid
from typing import Optional


class MessageableType(str, enum.Enum):
    """What a message is about."""
    PROPERTY = "property"
    AGENT = "agent"


class Message(Base):
    """
    Message about a property or an agent.
    Guests have no from_user and identify themselves by name and email.
    """

    __tablename__ = "messages"

    messageable_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    messageable_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    from_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    to_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("messages.id", ondelete="SET NULL"),
        nullable=True
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    subject: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    from_user: Mapped[Optional[User]] = relationship("User", foreign_keys=[from_user_id], lazy="selectin")
    to_user: Mapped[Optional[User]] = relationship("User", foreign_keys=[to_user_id], lazy="selectin")

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @property
    def sender_name(self) -> Optional[str]:
        return self.from_user.name if self.from_user is not None else self.name

    @property
    def sender_email(self) -> Optional[str]:
        return self.from_user.email if self.from_user is not None else self.email

    def involves(self, user: User) -> bool:
        return user.id in (self.from_user_id, self.to_user_id)
