"""
Site-wide SEO settings stored as typed key/value pairs.
"""

from sqlalchemy import String, Text, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
import enum
import json
from typing import Any, Optional


class SeoValueType(str, enum.Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    BOOLEAN = "boolean"
    NUMBER = "number"
    JSON = "json"


class SeoSetting(Base):
    __tablename__ = "seo_settings"

    key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=SeoValueType.TEXT.value)
    group: Mapped[str] = mapped_column(String(64), nullable=False, default="general", index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def typed_value(self) -> Any:
        """Value converted according to its declared type."""
        if self.value is None:
            return None
        if self.type == SeoValueType.BOOLEAN.value:
            return self.value.lower() in ("1", "true", "yes", "on")
        if self.type == SeoValueType.NUMBER.value:
            number = float(self.value)
            return int(number) if number.is_integer() else number
        if self.type == SeoValueType.JSON.value:
            return json.loads(self.value)
        return self.value
