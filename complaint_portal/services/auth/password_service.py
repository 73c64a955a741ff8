"""
Password management: change, reset and verification helpers.

The reset helpers are keyed on email and date of birth and stay
unauthenticated; the profile mirror of change-password acts on the token's
user instead of a posted email.
"""

from typing import Any, Dict, Optional

import requests
from sqlalchemy.orm import Session

from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import ExternalServiceError
from complaint_portal.core.logging import get_security_logger
from complaint_portal.core.security import PasswordManager, hash_password, verify_password
from complaint_portal.models.user import User
from complaint_portal.repositories.user import UserRepository
from complaint_portal.repositories.user.user_repository import normalize_email
from complaint_portal.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    UpdatePasswordRequest,
    VerifyUserRequest,
)
from complaint_portal.services.base import (
    BaseService,
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from complaint_portal.utils.datetime_utils import DateTimeHelper

RESET_FUNCTION_NAME = "resetPasswordWithVerification"


class PasswordService(BaseService[User, UserRepository]):
    """Password lifecycle for portal accounts."""

    def __init__(self, user_repository: UserRepository, db_session: Session):
        super().__init__(user_repository, db_session)
        self._audit = get_security_logger()

    # -------------------------------------------------------------------------
    # Change
    # -------------------------------------------------------------------------

    def change_password(self, request: ChangePasswordRequest) -> ServiceResult[Dict[str, Any]]:
        if not request.email or not request.current_password or not request.new_password:
            return ServiceResult.bad_request("Email, current password, and new password are required")

        new_password = request.new_password.strip()
        if len(new_password) < settings.PASSWORD_MIN_LENGTH:
            return ServiceResult.bad_request(
                f"New password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
                field="newPassword",
            )

        try:
            user = self.repository.find_by_email(request.email)
            if user is None:
                return ServiceResult.not_found("User", message="User not found")
            return self._replace_password(user, request.current_password, new_password)
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "change password", normalize_email(request.email))

    def change_password_for_user(
        self,
        user: User,
        current_password: str,
        new_password: str,
    ) -> ServiceResult[Dict[str, Any]]:
        """Same rules as ``change_password`` for an already authenticated user."""
        new_password = new_password.strip()
        if len(new_password) < settings.PASSWORD_MIN_LENGTH:
            return ServiceResult.validation_failure(
                f"New password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
                field="newPassword",
            )
        try:
            return self._replace_password(user, current_password, new_password)
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "change password", user.id)

    def _replace_password(self, user: User, current_password: str, new_password: str) -> ServiceResult[Dict[str, Any]]:
        if not user.password or not verify_password(current_password.strip(), user.password):
            self._audit.warning("password_change_rejected", user_id=user.id)
            return ServiceResult.unauthorized("Current password is incorrect")

        self.repository.update(user, {"password": hash_password(new_password)})
        self._audit.info("password_changed", user_id=user.id)
        return ServiceResult.success(
            {"success": True, "message": "Password changed successfully"},
            message="Password changed successfully",
        )

    # -------------------------------------------------------------------------
    # Reset helpers
    # -------------------------------------------------------------------------

    def update_password(self, request: UpdatePasswordRequest) -> ServiceResult[Dict[str, Any]]:
        if not request.email or not request.new_password:
            return ServiceResult.bad_request("Email and new password are required")

        new_password = request.new_password.strip()
        if len(new_password) < settings.PASSWORD_MIN_LENGTH:
            return ServiceResult.bad_request(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
                field="newPassword",
            )

        try:
            user = self.repository.find_by_email(request.email)
            if user is None:
                return ServiceResult.not_found("User", message="User not found.")
            self.repository.update(user, {"password": hash_password(new_password)})
            self._audit.info("password_updated", user_id=user.id)
            return ServiceResult.success({"message": "Password updated successfully. Please log in."})
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "update password", normalize_email(request.email))

    def forgot_password(self, request: ForgotPasswordRequest) -> ServiceResult[ForgotPasswordResponse]:
        """
        Issue a temporary password when email and date of birth match.

        Only the bcrypt hash of the temporary password is stored.
        """
        if not request.email or not request.dob:
            return ServiceResult.bad_request("Email and Date of Birth are required")

        try:
            user = self.repository.find_by_email(request.email)
            if user is None or not self._dob_matches(user.dob, request.dob):
                self._audit.warning("password_reset_rejected", email=normalize_email(request.email))
                return ServiceResult.not_found(
                    "User", message="User not found or Date of Birth does not match"
                )

            temporary = PasswordManager.generate_temporary_password()
            self.repository.update(user, {"password": hash_password(temporary)})
            self._audit.info("password_reset", user_id=user.id)
            return ServiceResult.success(
                ForgotPasswordResponse(
                    message=f"Password reset successful. Your new password is: {temporary}",
                    temp_password=temporary,
                    new_password=temporary,
                )
            )
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "reset password", normalize_email(request.email))

    @staticmethod
    def _dob_matches(stored: Optional[str], given: str) -> bool:
        """Exact match, or the same calendar date written another way."""
        if not stored:
            return False
        if stored.strip() == given.strip():
            return True
        try:
            return DateTimeHelper.parse_date(stored) == DateTimeHelper.parse_date(given)
        except (ValueError, OverflowError):
            return False

    def verify_user(self, request: VerifyUserRequest) -> ServiceResult[Dict[str, Any]]:
        if not request.email:
            return ServiceResult.bad_request("Email is required")
        try:
            if not self.repository.email_exists(request.email):
                return ServiceResult.not_found("User", message="User not found.")
            return ServiceResult.success({"message": "User verified successfully."})
        except Exception as e:
            return self._handle_exception(e, "verify user", normalize_email(request.email))

    # -------------------------------------------------------------------------
    # External reset function
    # -------------------------------------------------------------------------

    def reset_with_verification(self, payload: Dict[str, Any]) -> ServiceResult[Dict[str, Any]]:
        """
        Forward the request body to the external reset function.

        On success the data holds the upstream ``status_code`` and JSON
        ``body`` so the caller can pass both through unchanged.
        """
        try:
            if not settings.PASSWORD_RESET_FUNCTION_URL:
                raise ExternalServiceError(
                    "PASSWORD_RESET_FUNCTION_URL is not configured",
                    service_name=RESET_FUNCTION_NAME,
                    status_code=500,
                )

            url = f"{settings.PASSWORD_RESET_FUNCTION_URL.rstrip('/')}/{RESET_FUNCTION_NAME}"
            response = requests.post(url, json=payload, timeout=settings.PASSWORD_RESET_TIMEOUT)
            self._logger.info(
                f"Reset function responded with {response.status_code}",
                extra={"upstream_status": response.status_code},
            )
        except ExternalServiceError as e:
            self._logger.error(f"Password reset proxy misconfigured: {e.message}")
            return ServiceResult.failure(self._internal_error("Internal server error"))
        except requests.RequestException as e:
            self._logger.error(f"Password reset proxy failed: {e}", exc_info=True)
            return ServiceResult.failure(self._internal_error("Internal server error"))

        try:
            body = response.json()
        except ValueError:
            snippet = response.text[:200]
            return ServiceResult.failure(
                self._internal_error(f"Invalid response from server: {snippet}")
            )

        status_code = response.status_code if not response.ok else 200
        return ServiceResult.success({"status_code": status_code, "body": body})

    @staticmethod
    def _internal_error(message: str) -> ServiceError:
        return ServiceError(
            code=ErrorCode.INTERNAL_ERROR,
            message=message,
            severity=ErrorSeverity.ERROR,
        )
