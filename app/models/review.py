"""
Review model: a user's star rating of a property or a blog post.
"""

from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.user import User
import enum
import uuid
from typing import Optional


class ReviewableType(str, enum.Enum):
    PROPERTY = "property"
    POST = "post"


class Review(Base):
    """Rating from 1 to 5 with an optional comment. One per user and target."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "reviewable_type", "reviewable_id", name="uq_review_user_target"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    reviewable_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    reviewable_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    user: Mapped[User] = relationship("User", lazy="selectin")

    @property
    def reviewer_name(self) -> str:
        return self.user.name if self.user is not None else ""
