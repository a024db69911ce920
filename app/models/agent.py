"""
Agent model: the public profile of a real-estate agent listing properties.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
import uuid
from typing import Optional, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User


class Agent(Base):
    """
    Agent profile. May be linked to a login account through user_id; linked
    agent-role users manage only the listings assigned to their profile.
    """

    __tablename__ = "agents"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(String(100), unique=True, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    office_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    social_media: Mapped[Optional[Dict[str, str]]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        nullable=False,
        default=Decimal("5.00")
    )
    properties_sold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    experience_years: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
        comment="Login account linked to this agent profile"
    )

    user: Mapped[Optional["User"]] = relationship("User", back_populates="agent_profile")

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, email={self.email})>"
