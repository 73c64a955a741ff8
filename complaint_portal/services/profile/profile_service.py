"""
Profile service: the signed-in user's own account details and picture.
"""

from typing import Any, Dict

from sqlalchemy.orm import Session

from complaint_portal.models.user import User
from complaint_portal.repositories.user import UserRepository
from complaint_portal.schemas.auth import UserPublic
from complaint_portal.schemas.profile import ProfileUpdate
from complaint_portal.services.base import BaseService, ServiceResult
from complaint_portal.storage import BlobStore, UploadedFile, store_image

PROFILE_IMAGE_PREFIX = "profile-images"


class ProfileService(BaseService[User, UserRepository]):
    def __init__(self, user_repository: UserRepository, blob_store: BlobStore, db_session: Session):
        super().__init__(user_repository, db_session)
        self.blob_store = blob_store

    def get_profile(self, user: User) -> ServiceResult[UserPublic]:
        return ServiceResult.success(UserPublic.model_validate(user))

    def update_profile(self, user: User, data: ProfileUpdate) -> ServiceResult[UserPublic]:
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return ServiceResult.success(UserPublic.model_validate(user), message="Nothing to update")
        try:
            self.repository.update(user, changes)
            return ServiceResult.success(UserPublic.model_validate(user), message="Profile updated")
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "update profile", user.id)

    def upload_image(self, user: User, image: UploadedFile) -> ServiceResult[UserPublic]:
        """Store a new profile picture; the previous one is removed once the row points at the new one."""
        previous_url = user.profile_image_url
        try:
            url = store_image(
                self.blob_store,
                PROFILE_IMAGE_PREFIX,
                user.id,
                image.filename,
                image.data,
                image.content_type,
            )
            self.repository.update(user, {"profile_image_url": url})
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "upload profile image", user.id)

        previous_key = self.blob_store.key_from_url(previous_url) if previous_url else None
        if previous_key and previous_url != user.profile_image_url:
            self.blob_store.delete(previous_key)
        return ServiceResult.success(UserPublic.model_validate(user), message="Profile image updated")
