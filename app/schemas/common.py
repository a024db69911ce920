"""
Response envelope shared by every endpoint.

Success: {"success": true, "message", "data", "code", "timestamp"}
Paginated responses add "meta" with page information.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Generic, List, Optional, Sequence, TypeVar
from datetime import datetime, timezone
import math

T = TypeVar("T")

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def current_timestamp() -> str:
    """UTC timestamp with microseconds, e.g. 2024-05-01T10:20:30.123456Z."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


class ORMModel(BaseModel):
    """Base for response schemas built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


class APIResponse(BaseModel, Generic[T]):
    """Uniform success envelope."""

    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Human-readable outcome", examples=["Property created successfully"])
    data: Optional[T] = Field(None, description="Response payload")
    code: int = Field(200, description="HTTP status code", examples=[200])
    timestamp: str = Field(default_factory=current_timestamp, description="UTC time of the response")


class PaginationMeta(BaseModel):
    """Page information for list endpoints."""

    current_page: int
    per_page: int
    total: int
    last_page: int
    from_: Optional[int] = Field(None, alias="from", serialization_alias="from")
    to: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, page: int, per_page: int, total: int) -> "PaginationMeta":
        last_page = max(1, math.ceil(total / per_page)) if per_page else 1
        first = (page - 1) * per_page + 1
        last = min(page * per_page, total)
        return cls(
            current_page=page,
            per_page=per_page,
            total=total,
            last_page=last_page,
            from_=first if total and first <= total else None,
            to=last if total and first <= total else None,
        )


class PaginatedResponse(APIResponse[List[T]], Generic[T]):
    """Success envelope for paginated lists."""

    meta: PaginationMeta


def success_response(data: Any = None, message: str = "Success", code: int = 200, **extra: Any) -> dict:
    """Build a success envelope as a dict for the route's response_model to validate."""
    return {
        "success": True,
        "message": message,
        "data": data,
        "code": code,
        "timestamp": current_timestamp(),
        **extra,
    }


def paginated_response(
    items: Sequence[Any],
    total: int,
    page: int,
    per_page: int,
    message: str = "Success",
    **extra: Any
) -> dict:
    """Success envelope with pagination meta."""
    return success_response(
        data=list(items),
        message=message,
        meta=PaginationMeta.build(page, per_page, total),
        **extra,
    )
