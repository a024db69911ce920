"""
Media library model for files uploaded through the admin area.
"""

from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
import enum
import uuid
from typing import Any, Dict, Optional


class MediaType(str, enum.Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"

    @classmethod
    def from_mime(cls, mime_type: str) -> "MediaType":
        """Classify a MIME type into a media library bucket."""
        mime_type = (mime_type or "").lower()
        if mime_type.startswith("image/"):
            return cls.IMAGE
        if mime_type.startswith("video/"):
            return cls.VIDEO
        if mime_type.startswith("audio/"):
            return cls.AUDIO
        if mime_type.startswith("text/") or mime_type in (
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ):
            return cls.DOCUMENT
        return cls.OTHER


class Media(Base):
    """Uploaded file with its metadata."""

    __tablename__ = "media"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=MediaType.OTHER.value, index=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    alt_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    metadata_: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    uploaded_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    @property
    def url(self) -> str:
        return f"/uploads/{self.path}"
