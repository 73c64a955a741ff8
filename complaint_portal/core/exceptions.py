"""
Custom Exceptions for the Complaint Portal

This module defines the application exception hierarchy and the FastAPI
handlers that turn those exceptions into JSON responses.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaint_portal.config.settings import settings
from complaint_portal.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    OPERATION_FAILED = "OPERATION_FAILED"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business logic errors
    INVALID_STATE = "INVALID_STATE"
    CONFLICT = "CONFLICT"

    # File errors
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FILE_TYPE_NOT_ALLOWED = "FILE_TYPE_NOT_ALLOWED"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class OperationError(BaseAppException):
    """Exception raised when an operation fails"""

    def __init__(
        self,
        message: str = "Operation failed",
        error_code: ErrorCode = ErrorCode.OPERATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message, error_code, details, status_code)


class BadRequestError(BaseAppException):
    """Exception raised for malformed or incomplete requests"""

    def __init__(
        self,
        message: str = "Bad request",
        error_code: ErrorCode = ErrorCode.INVALID_REQUEST,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 400)


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class ConflictError(BaseAppException):
    """Exception raised when a request conflicts with existing state"""

    def __init__(
        self,
        message: str = "Conflict",
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 409)


class InvalidStateError(BaseAppException):
    """Exception raised when an entity is not in a state that allows the operation"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_STATE, details, 409)


# ========================================
# Authentication & Authorization
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 401)


class AuthorizationError(BaseAppException):
    """Exception raised when the caller lacks permission"""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        error_code: ErrorCode = ErrorCode.AUTHORIZATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 403)


class InvalidTokenError(AuthenticationError):
    """Exception raised for malformed or tampered tokens"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, ErrorCode.TOKEN_INVALID)


class TokenExpiredError(AuthenticationError):
    """Exception raised for expired tokens"""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


# ========================================
# Repository Exceptions
# ========================================

class RepositoryError(BaseAppException):
    """Exception raised when a data access operation fails"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, ErrorCode.DATABASE_ERROR, None, 500)


class EntityNotFoundError(BaseAppException):
    """Exception raised when a repository lookup finds nothing"""

    def __init__(self, message: str = "Entity not found"):
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, None, 404)


class EntityAlreadyExistsError(BaseAppException):
    """Exception raised on unique constraint violations"""

    def __init__(self, message: str = "Entity already exists"):
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, None, 409)


# ========================================
# File & External Service Exceptions
# ========================================

class FileValidationError(ValidationError):
    """Exception raised when an uploaded file is rejected"""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.FILE_TYPE_NOT_ALLOWED):
        super().__init__(message, error_code=error_code)


class ExternalServiceError(BaseAppException):
    """Exception raised when a downstream HTTP service misbehaves"""

    def __init__(
        self,
        message: str = "External service error",
        service_name: Optional[str] = None,
        status_code: int = 502,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        if service_name:
            details["service"] = service_name
        super().__init__(message, ErrorCode.EXTERNAL_SERVICE_ERROR, details, status_code)


# ========================================
# FastAPI exception handlers
# ========================================

def is_legacy_path(path: str) -> bool:
    """Legacy endpoints live under the bare /api prefix and keep a flat error body."""
    if path.startswith(settings.API_V1_STR):
        return False
    return path.startswith(settings.LEGACY_API_PREFIX)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"{exc.__class__.__name__}: {exc.message}",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.error_code.value,
        },
    )
    if is_legacy_path(request.url.path):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if is_legacy_path(request.url.path):
        message = "Invalid request body"
        if errors:
            message = str(errors[0].get("msg", message))
        return JSONResponse(status_code=400, content={"error": message})

    field_errors: Dict[str, List[str]] = {}
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        field_errors.setdefault(loc or "body", []).append(str(err.get("msg")))
    body = ValidationError("Request validation failed", field_errors=field_errors).to_dict()
    return JSONResponse(status_code=422, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if not is_legacy_path(request.url.path):
        return await default_http_exception_handler(request, exc)
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error: {exc}",
        exc_info=exc,
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    if is_legacy_path(request.url.path):
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content=OperationError("Internal server error").to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application exception handlers on the FastAPI app."""
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
