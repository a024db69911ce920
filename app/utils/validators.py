"""
Validation and text utilities shared by schemas and services.
Provides slug generation, excerpt extraction and field format checks.
"""

import re
import unicodedata
from typing import Any, Optional
from email_validator import validate_email, EmailNotValidError


class ValidationUtils:
    """
    Utility class for common validation operations.
    Methods raise ValueError so they can be used inside pydantic validators.
    """

    SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
    HEX_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')
    TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
    PHONE_PATTERN = re.compile(r'^\+?[0-9\s\-()]{6,20}$')
    TAG_PATTERN = re.compile(r'<[^>]+>')

    @staticmethod
    def slugify(value: str) -> str:
        """Lowercase ASCII slug with words joined by hyphens."""
        normalized = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
        slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
        return slug or "item"

    @staticmethod
    def validate_slug(value: str) -> str:
        if not ValidationUtils.SLUG_PATTERN.match(value):
            raise ValueError("Slug may only contain lowercase letters, numbers and hyphens")
        return value

    @staticmethod
    def validate_hex_color(value: str) -> str:
        if not ValidationUtils.HEX_COLOR_PATTERN.match(value):
            raise ValueError("Color must be a hex value like #3B82F6")
        return value.upper()

    @staticmethod
    def validate_time(value: str) -> str:
        if not ValidationUtils.TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM format")
        return value

    @staticmethod
    def validate_phone_number(value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not ValidationUtils.PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone number format")
        return value

    @staticmethod
    def validate_email_address(email: Any) -> str:
        """Normalize an email address without DNS lookups."""
        try:
            return validate_email(str(email).strip(), check_deliverability=False).normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: {str(e)}")

    @staticmethod
    def strip_tags(value: str) -> str:
        return re.sub(r"\s+", " ", ValidationUtils.TAG_PATTERN.sub(" ", value or "")).strip()

    @staticmethod
    def make_excerpt(content: str, length: int = 150) -> str:
        """First `length` characters of the plain text, with an ellipsis when cut."""
        text = ValidationUtils.strip_tags(content)
        if len(text) <= length:
            return text
        return text[:length].rstrip() + "..."

    @staticmethod
    def clean_optional(value: Optional[str]) -> Optional[str]:
        """Trim a string and turn blanks into None."""
        if value is None:
            return None
        value = value.strip()
        return value or None
