"""
Error response schemas for API documentation and consistent error formatting.
Provides the error envelope model and OpenAPI `responses` helpers for routers.
"""

from http import HTTPStatus
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from app.permissions import FORBIDDEN_MESSAGE


class APIErrorResponse(BaseModel):
    """Uniform error envelope."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message", examples=["The given data was invalid."])
    errors: Optional[Dict[str, List[str]]] = Field(
        None,
        description="Field-keyed validation messages",
        examples=[{"email": ["The email has already been taken."]}]
    )
    code: int = Field(..., description="HTTP status code", examples=[422])
    timestamp: str = Field(..., description="UTC time of the response", examples=["2024-01-01T00:00:00.000000Z"])


def _example(code: int, message: str, errors: Optional[Dict[str, List[str]]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "errors": errors,
        "code": code,
        "timestamp": "2024-01-01T00:00:00.000000Z",
    }


ERROR_EXAMPLES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Bad Request", "example": _example(400, "Invalid request parameters")},
    401: {"description": "Unauthorized", "example": _example(401, "Authentication token required")},
    403: {"description": "Forbidden", "example": _example(403, FORBIDDEN_MESSAGE)},
    404: {"description": "Not Found", "example": _example(404, "Property not found")},
    409: {"description": "Conflict", "example": _example(409, "Constraint violation: Duplicate value for unique field")},
    422: {
        "description": "Validation Error",
        "example": _example(422, "The given data was invalid.", {"title": ["Field required"]}),
    },
    429: {"description": "Too Many Requests", "example": _example(429, "Rate limit exceeded")},
    500: {"description": "Internal Server Error", "example": _example(500, "An unexpected error occurred. Please try again later.")},
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    OpenAPI `responses` entries for the given status codes.
    Codes without a prepared example get the standard reason phrase.
    """
    responses = {}
    for code in status_codes:
        entry = ERROR_EXAMPLES.get(code)
        if entry is None:
            phrase = HTTPStatus(code).phrase
            entry = {"description": phrase, "example": _example(code, phrase)}
        responses[code] = {
            "model": APIErrorResponse,
            "description": entry["description"],
            "content": {"application/json": {"example": entry["example"]}},
        }
    return responses


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(401, 403)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(401, 403, 404, 422)
