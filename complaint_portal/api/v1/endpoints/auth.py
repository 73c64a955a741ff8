"""
Authentication endpoints: signup, captcha, login and the current user.
"""

from fastapi import APIRouter, Depends, status

from complaint_portal.api.results import unwrap_result
from complaint_portal.dependencies import CurrentUser, get_auth_service
from complaint_portal.schemas.auth import (
    CaptchaResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserPublic,
)
from complaint_portal.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserPublic:
    return unwrap_result(auth_service.signup(body))


@router.get("/captcha", response_model=CaptchaResponse)
def captcha() -> CaptchaResponse:
    """Fresh captcha text plus the signed token that must accompany the answer."""
    return AuthService.issue_captcha()


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return unwrap_result(auth_service.role_login(body))


@router.get("/me", response_model=UserPublic)
def me(user: CurrentUser) -> UserPublic:
    return UserPublic.model_validate(user)
