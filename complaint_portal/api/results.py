"""
Translate service results into HTTP responses.

Endpoints call ``unwrap_result`` on every ``ServiceResult``; failures become
the matching application exception, which the registered handlers render.
"""

from typing import Optional, TypeVar

from complaint_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    ErrorCode as HttpErrorCode,
    ExternalServiceError,
    InvalidStateError,
    OperationError,
    ResourceNotFoundError,
    ValidationError,
)
from complaint_portal.services.base import ErrorCode, ServiceResult

T = TypeVar("T")


def unwrap_result(result: ServiceResult[T], internal_message: Optional[str] = None) -> T:
    """
    Return the result data or raise the exception for its error code.

    Args:
        result: Service outcome
        internal_message: Replaces the message of internal errors, so a
            route can keep its own generic wording for unexpected failures
    """
    if result.is_success:
        return result.data

    error = result.error
    code = error.code
    message = error.message

    if code == ErrorCode.BAD_REQUEST:
        raise BadRequestError(message)
    if code == ErrorCode.VALIDATION_ERROR:
        field_errors = {error.field: [message]} if error.field else None
        raise ValidationError(message, field_errors=field_errors)
    if code == ErrorCode.NOT_FOUND:
        details = error.details or {}
        raise ResourceNotFoundError(
            details.get("resource_type") or "Resource",
            details.get("resource_id"),
            message=message,
        )
    if code == ErrorCode.ALREADY_EXISTS:
        raise ConflictError(message, HttpErrorCode.DUPLICATE_ENTRY)
    if code == ErrorCode.CONFLICT:
        raise ConflictError(message, details=error.details)
    if code == ErrorCode.INVALID_STATE:
        raise InvalidStateError(message, details=error.details)
    if code == ErrorCode.UNAUTHORIZED:
        raise AuthenticationError(message)
    if code == ErrorCode.INSUFFICIENT_PERMISSIONS:
        raise AuthorizationError(message)
    if code == ErrorCode.EXTERNAL_SERVICE_ERROR:
        raise ExternalServiceError(message)
    raise OperationError(internal_message or message, HttpErrorCode.INTERNAL_ERROR)
