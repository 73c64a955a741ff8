"""
Authentication and account schemas.

Bodies of the legacy ``/api`` handlers declare every field optional so the
handlers can answer missing input with their own 400 messages.
"""

from typing import Optional

from pydantic import AliasChoices, EmailStr, Field

from complaint_portal.models.base.enums import SupervisorCategory, UserRole
from complaint_portal.schemas.common.base import BaseCreateSchema, BaseSchema, UTCDateTime


class UserPublic(BaseSchema):
    """User profile without the password, keyed as the web client expects."""

    uid: str = Field(validation_alias=AliasChoices("id", "uid"), serialization_alias="uid")
    email: str
    role: UserRole
    name: str
    dob: Optional[str] = None
    department: Optional[str] = None
    category: Optional[SupervisorCategory] = None
    profile_image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profile_image_url", "profileImage"),
        serialization_alias="profileImage",
    )
    created_at: Optional[UTCDateTime] = None


class CredentialsRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CredentialsRequest):
    """Role login: credentials plus the captcha and, for maintenance, the access key."""

    captcha: Optional[str] = None
    captcha_token: Optional[str] = None
    maintenance_key: Optional[str] = None


class LoginResponse(BaseSchema):
    ok: bool = True
    user_data: UserPublic
    access_token: str
    token_type: str = "bearer"
    redirect: str


class CaptchaResponse(BaseSchema):
    captcha: str
    captcha_token: str


class SignupRequest(BaseCreateSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole
    dob: str = Field(..., min_length=1, max_length=32)
    department: Optional[str] = Field(default=None, max_length=255)
    category: Optional[SupervisorCategory] = None


class ChangePasswordRequest(BaseSchema):
    email: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class ProfileChangePasswordRequest(BaseSchema):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UpdatePasswordRequest(BaseSchema):
    email: Optional[str] = None
    new_password: Optional[str] = None


class ForgotPasswordRequest(BaseSchema):
    email: Optional[str] = None
    dob: Optional[str] = None


class ForgotPasswordResponse(BaseSchema):
    message: str
    temp_password: str
    new_password: str


class VerifyUserRequest(BaseSchema):
    email: Optional[str] = None
