"""
PropertyImage model for managing property image uploads.
Handles image metadata, file storage, and property associations.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
import enum
import uuid
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.models.property import Property


class ImageKind(str, enum.Enum):
    GALLERY = "gallery"
    FLOOR_PLAN = "floor_plan"


class PropertyImage(Base):
    """
    PropertyImage model for managing uploaded property images.
    Stores file metadata and maintains relationships with properties.
    """

    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    # File information
    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Original filename of the uploaded image"
    )

    image_path: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        unique=True,
        comment="Path of the stored file relative to the upload directory"
    )

    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Presentation
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    alt_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=ImageKind.GALLERY.value)

    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Whether this is the primary image for the property"
    )

    sort_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Display order for image gallery"
    )

    listing: Mapped["Property"] = relationship("Property", back_populates="images")

    def __repr__(self) -> str:
        """String representation of the property image."""
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, filename={self.filename})>"

    @property
    def url(self) -> str:
        return f"/uploads/{self.image_path}"
