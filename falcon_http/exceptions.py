"""
Custom exception classes and error handling for Falcon HTTP.

Provides consistent error responses across all API endpoints, plus the
error types raised by the request dispatcher and the persistence layer.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError


class APIException(Exception):
    """Base exception for API errors."""
    
    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ResourceNotFoundError(APIException):
    """Exception raised when a requested resource is not found."""
    
    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} with id {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class NoActiveResourceError(APIException):
    """Exception raised when the store has no active project or environment."""

    def __init__(self, resource_type: str):
        super().__init__(
            detail=f"No active {resource_type}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NO_ACTIVE_RESOURCE"
        )


# Dispatcher errors. These never reach the exception handlers: the send
# state machine turns them into a Failed(message) state.

class DispatchError(Exception):
    """A send failed before a response could be captured."""

    error_type = "unknown"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidUrlError(DispatchError):
    """The resolved URL could not be parsed."""

    error_type = "invalid_url"


class InvalidHeaderError(DispatchError):
    """A header name or value is not valid after substitution."""

    error_type = "invalid_header"


class TransportError(DispatchError):
    """Connection, TLS or timeout failure reported by the transport."""

    error_type = "network_error"


class PersistenceError(Exception):
    """Reading or writing the store snapshot failed."""


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")
    
    detail = "; ".join(error_messages) if error_messages else "Validation error"
    
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handler for SQLAlchemy database errors."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error_code": "DATABASE_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
