"""
Legacy ``/api`` handlers.

These keep the request and response shapes of the original serverless
handlers: camelCase JSON bodies, flat ``{"error": "..."}`` failures, and
their own generic message for unexpected errors.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from complaint_portal.api.results import unwrap_result
from complaint_portal.core.logging import get_logger
from complaint_portal.dependencies import (
    HandlerUser,
    get_auth_service,
    get_complaint_service,
    get_password_service,
)
from complaint_portal.schemas.auth import (
    ChangePasswordRequest,
    CredentialsRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginResponse,
    UpdatePasswordRequest,
    VerifyUserRequest,
)
from complaint_portal.schemas.complaint import LegacyStatusUpdateRequest
from complaint_portal.services.auth import AuthService, PasswordService
from complaint_portal.services.complaint import ComplaintService

logger = get_logger(__name__)

router = APIRouter(tags=["Legacy"])


@router.post("/login", response_model=LoginResponse)
def login(
    body: Optional[CredentialsRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Email/password login returning the profile without the password."""
    result = auth_service.login(body or CredentialsRequest())
    return unwrap_result(result, internal_message="Login failed. Please try again.")


@router.post("/change-password")
def change_password(
    body: Optional[ChangePasswordRequest] = None,
    password_service: PasswordService = Depends(get_password_service),
) -> Dict[str, Any]:
    result = password_service.change_password(body or ChangePasswordRequest())
    return unwrap_result(result, internal_message="Failed to change password. Please try again.")


@router.post("/update-password")
def update_password(
    body: Optional[UpdatePasswordRequest] = None,
    password_service: PasswordService = Depends(get_password_service),
) -> Dict[str, Any]:
    result = password_service.update_password(body or UpdatePasswordRequest())
    return unwrap_result(result, internal_message="Failed to update password. Please try again.")


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
def forgot_password(
    body: Optional[ForgotPasswordRequest] = None,
    password_service: PasswordService = Depends(get_password_service),
) -> ForgotPasswordResponse:
    result = password_service.forgot_password(body or ForgotPasswordRequest())
    return unwrap_result(result, internal_message="Failed to reset password. Please try again.")


@router.post("/verify-user")
def verify_user(
    body: Optional[VerifyUserRequest] = None,
    password_service: PasswordService = Depends(get_password_service),
) -> Dict[str, Any]:
    result = password_service.verify_user(body or VerifyUserRequest())
    return unwrap_result(result, internal_message="Failed to verify user. Please try again.")


@router.post("/update-complaint-status")
def update_complaint_status(
    user: HandlerUser,
    body: Optional[LegacyStatusUpdateRequest] = None,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> Dict[str, Any]:
    result = complaint_service.legacy_update_status(user, body or LegacyStatusUpdateRequest())
    return unwrap_result(result, internal_message="Failed to update complaint status")


@router.post("/resetPasswordWithVerification")
def reset_password_with_verification(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    password_service: PasswordService = Depends(get_password_service),
) -> JSONResponse:
    """Proxy to the external reset function; its status and body pass through."""
    forwarded = unwrap_result(password_service.reset_with_verification(payload or {}))
    return JSONResponse(status_code=forwarded["status_code"], content=forwarded["body"])
