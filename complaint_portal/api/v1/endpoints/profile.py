"""
Profile endpoints: the signed-in user's own account.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, File, UploadFile

from complaint_portal.api.results import unwrap_result
from complaint_portal.core.exceptions import ValidationError
from complaint_portal.dependencies import CurrentUser, get_password_service, get_profile_service
from complaint_portal.schemas.auth import ProfileChangePasswordRequest, UserPublic
from complaint_portal.schemas.profile import ProfileUpdate
from complaint_portal.services.auth import PasswordService
from complaint_portal.services.profile import ProfileService
from complaint_portal.storage import UploadedFile

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=UserPublic)
def get_profile(
    user: CurrentUser,
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserPublic:
    return unwrap_result(profile_service.get_profile(user))


@router.patch("", response_model=UserPublic)
def update_profile(
    body: ProfileUpdate,
    user: CurrentUser,
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserPublic:
    return unwrap_result(profile_service.update_profile(user, body))


@router.post("/image", response_model=UserPublic)
def upload_image(
    user: CurrentUser,
    image: UploadFile = File(...),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserPublic:
    if not image.filename:
        raise ValidationError("Image file is required", field_errors={"image": ["Image file is required"]})
    upload = UploadedFile.read_from(image.filename, image.file, image.content_type)
    return unwrap_result(profile_service.upload_image(user, upload))


@router.post("/change-password")
def change_password(
    body: ProfileChangePasswordRequest,
    user: CurrentUser,
    password_service: PasswordService = Depends(get_password_service),
) -> Dict[str, Any]:
    result = password_service.change_password_for_user(user, body.current_password, body.new_password)
    return unwrap_result(result)
