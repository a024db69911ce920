"""
Error handling service for consistent error response formatting and logging.
Every failure is rendered as {"success": false, "message", "errors", "code", "timestamp"}.
"""

from typing import Dict, Any, Optional, List
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError as PydanticValidationError
from app.schemas.common import current_timestamp
from app.utils.exceptions import APIException, ValidationError
import logging

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of field names
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie", "form"}


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    """

    @staticmethod
    def format_error_response(
        message: str,
        code: int,
        errors: Optional[Dict[str, List[str]]] = None
    ) -> Dict[str, Any]:
        """
        Format error response in the uniform envelope.

        Args:
            message: Human-readable error message
            code: HTTP status code
            errors: Optional field-keyed validation messages

        Returns:
            Formatted error response dictionary
        """
        return {
            "success": False,
            "message": message,
            "errors": errors or None,
            "code": code,
            "timestamp": current_timestamp(),
        }

    @staticmethod
    def _request_id(request: Optional[Request]) -> Optional[str]:
        if request is None:
            return None
        return getattr(request.state, "request_id", None)

    @staticmethod
    def _path(request: Optional[Request]) -> Optional[str]:
        return request.url.path if request is not None else None

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle custom API exceptions with structured response."""
        request_id = ErrorHandlerService._request_id(request)

        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": ErrorHandlerService._path(request)
            }
        )

        errors = exception.field_errors if isinstance(exception, ValidationError) else None
        return JSONResponse(
            status_code=exception.status_code,
            content=ErrorHandlerService.format_error_response(
                message=str(exception.detail),
                code=exception.status_code,
                errors=errors
            ),
            headers=exception.headers
        )

    @staticmethod
    def collect_field_errors(raw_errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
        """
        Turn pydantic error entries into a field-keyed error bag.

        ("body", "address", "city") becomes "address.city"; model-level errors
        with no field are reported under "non_field_errors".
        """
        field_errors: Dict[str, List[str]] = {}
        for error in raw_errors:
            location = [str(part) for part in error.get("loc", ())]
            if location and location[0] in _LOCATION_PREFIXES:
                location = location[1:]
            field = ".".join(location) or "non_field_errors"

            message = str(error.get("msg", "Invalid value"))
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]

            field_errors.setdefault(field, []).append(message)
        return field_errors

    @staticmethod
    def handle_validation_error(
        exception: PydanticValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle request and pydantic validation errors with field-keyed details."""
        request_id = ErrorHandlerService._request_id(request)
        field_errors = ErrorHandlerService.collect_field_errors(exception.errors())

        logger.warning(
            f"Validation Error [{request_id}]: {len(field_errors)} field errors",
            extra={
                "request_id": request_id,
                "path": ErrorHandlerService._path(request),
                "validation_errors": field_errors
            }
        )

        return JSONResponse(
            status_code=422,
            content=ErrorHandlerService.format_error_response(
                message="The given data was invalid.",
                code=422,
                errors=field_errors
            )
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle database errors; integrity violations become 409."""
        request_id = ErrorHandlerService._request_id(request)

        if isinstance(exception, IntegrityError):
            status_code = 409
            message = "Data integrity constraint violation"
            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            if constraint_info:
                message = f"Constraint violation: {constraint_info}"
        else:
            status_code = 500
            message = "Database operation failed"

        logger.error(
            f"Database Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": ErrorHandlerService._path(request),
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(message=message, code=status_code)
        )

    @staticmethod
    def handle_http_exception(
        exception: StarletteHTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle framework HTTP exceptions such as unknown routes."""
        request_id = ErrorHandlerService._request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": ErrorHandlerService._path(request)
            }
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=ErrorHandlerService.format_error_response(
                message=str(exception.detail),
                code=exception.status_code
            ),
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle unexpected errors without exposing internals."""
        request_id = ErrorHandlerService._request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": ErrorHandlerService._path(request),
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content=ErrorHandlerService.format_error_response(
                message="An unexpected error occurred. Please try again later.",
                code=500
            )
        )

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        error_msg = str(exception.orig).lower()

        if "unique" in error_msg:
            return "Duplicate value for unique field"
        if "foreign key" in error_msg:
            return "Referenced record does not exist"
        if "not null" in error_msg:
            return "Required field cannot be empty"
        if "check constraint" in error_msg:
            return "Value does not meet validation requirements"
        return None

    @staticmethod
    def register(app: FastAPI) -> None:
        """Install the handlers on an application."""

        @app.exception_handler(APIException)
        async def api_exception_handler(request: Request, exc: APIException):
            return ErrorHandlerService.handle_api_exception(exc, request)

        @app.exception_handler(RequestValidationError)
        async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
            return ErrorHandlerService.handle_validation_error(exc, request)

        @app.exception_handler(PydanticValidationError)
        async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
            return ErrorHandlerService.handle_validation_error(exc, request)

        @app.exception_handler(SQLAlchemyError)
        async def database_exception_handler(request: Request, exc: SQLAlchemyError):
            return ErrorHandlerService.handle_database_error(exc, request)

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            return ErrorHandlerService.handle_http_exception(exc, request)

        @app.exception_handler(Exception)
        async def unexpected_exception_handler(request: Request, exc: Exception):
            return ErrorHandlerService.handle_unexpected_error(exc, request)
