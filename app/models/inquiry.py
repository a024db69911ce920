"""
Inquiry models: questions about a specific listing and general contact-form submissions.
"""

from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.models.property import Property
from datetime import datetime
import enum
import uuid
from typing import Optional


class InquiryType(str, enum.Enum):
    GENERAL = "general"
    VIEWING = "viewing"
    OFFER = "offer"
    FINANCING = "financing"


class InquiryStatus(str, enum.Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    RESPONDED = "responded"
    CLOSED = "closed"


class ContactMethod(str, enum.Enum):
    EMAIL = "email"
    PHONE = "phone"
    WHATSAPP = "whatsapp"


class Inquiry(Base):
    """Question sent to the agent of a listing."""

    __tablename__ = "inquiries"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    inquiry_type: Mapped[str] = mapped_column(String(32), nullable=False, default=InquiryType.GENERAL.value)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=InquiryStatus.PENDING.value,
        index=True
    )
    preferred_contact_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    preferred_contact_method: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ContactMethod.EMAIL.value
    )
    agent_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    listing: Mapped[Property] = relationship("Property", lazy="selectin")

    @property
    def property_title(self) -> Optional[str]:
        return self.listing.title if self.listing is not None else None


class ContactInquiryType(str, enum.Enum):
    GENERAL = "general"
    BUYING = "buying"
    SELLING = "selling"
    RENTING = "renting"
    VALUATION = "valuation"


class ContactInquiryStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ContactInquiry(Base):
    """Submission of the public contact form."""

    __tablename__ = "contact_inquiries"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    inquiry_type: Mapped[str] = mapped_column(String(32), nullable=False, default=ContactInquiryType.GENERAL.value)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ContactInquiryStatus.NEW.value,
        index=True
    )
    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
