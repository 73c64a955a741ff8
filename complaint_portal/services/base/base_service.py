"""
Base service class providing common functionality for all services.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Generic, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BaseAppException,
    ConflictError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ExternalServiceError,
    InvalidStateError,
    ResourceNotFoundError,
    ValidationError,
)
from complaint_portal.core.logging import get_logger
from complaint_portal.repositories.base.base_repository import BaseRepository
from complaint_portal.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo", bound=BaseRepository)

_EXCEPTION_CODES = (
    (ValidationError, ErrorCode.VALIDATION_ERROR),
    (EntityNotFoundError, ErrorCode.NOT_FOUND),
    (ResourceNotFoundError, ErrorCode.NOT_FOUND),
    (EntityAlreadyExistsError, ErrorCode.ALREADY_EXISTS),
    (ConflictError, ErrorCode.CONFLICT),
    (InvalidStateError, ErrorCode.INVALID_STATE),
    (AuthenticationError, ErrorCode.UNAUTHORIZED),
    (AuthorizationError, ErrorCode.INSUFFICIENT_PERMISSIONS),
    (ExternalServiceError, ErrorCode.EXTERNAL_SERVICE_ERROR),
    (ValueError, ErrorCode.VALIDATION_ERROR),
    (SQLAlchemyError, ErrorCode.INTERNAL_ERROR),
)


class BaseService(ABC, Generic[TModel, TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(f"complaint_portal.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Application exceptions keep their own message; anything else is
        reported as ``Failed to <operation>``.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code = self._map_exception_to_error_code(exception)
        if error_code == ErrorCode.INTERNAL_ERROR:
            self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
            severity = ErrorSeverity.CRITICAL
        else:
            self._logger.warning(f"{operation} rejected: {exception}", extra=context)
            severity = ErrorSeverity.WARNING

        if isinstance(exception, BaseAppException) and error_code != ErrorCode.INTERNAL_ERROR:
            message = exception.message
        elif isinstance(exception, ValueError):
            message = str(exception)
        else:
            message = f"Failed to {operation}"

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                details={
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                },
                severity=severity,
            )
        )

    @staticmethod
    def _map_exception_to_error_code(exception: Exception) -> ErrorCode:
        for exc_type, error_code in _EXCEPTION_CODES:
            if isinstance(exception, exc_type):
                return error_code
        return ErrorCode.INTERNAL_ERROR

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(entity, commit=False)
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction rolled back: {e}")
            raise

    def _commit(self) -> None:
        """Commit the current transaction with error handling."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, keeping the original error primary."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            self._logger.warning(f"Rollback failed: {e}")
