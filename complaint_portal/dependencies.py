"""
FastAPI dependencies: database session, current user, role checks and
service factories.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from complaint_portal.api.results import unwrap_result
from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import AuthenticationError, AuthorizationError
from complaint_portal.core.logging import user_id as user_id_var
from complaint_portal.db.session import get_db
from complaint_portal.models.base.enums import UserRole
from complaint_portal.models.user import User
from complaint_portal.repositories import (
    ComplaintRepository,
    NotificationRepository,
    UserRepository,
)
from complaint_portal.services.analytics import AnalyticsService, ComplaintExportService
from complaint_portal.services.auth import AuthService, PasswordService
from complaint_portal.services.complaint import ComplaintService
from complaint_portal.services.notification import NotificationService
from complaint_portal.services.profile import ProfileService
from complaint_portal.storage import BlobStore, get_blob_store

# OAuth2 scheme for Bearer tokens
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False,
)

DbSession = Annotated[Session, Depends(get_db)]


# ------------------------------------------------------------------ #
# Service factories
# ------------------------------------------------------------------ #
def get_storage() -> BlobStore:
    return get_blob_store()


def get_auth_service(db: DbSession) -> AuthService:
    return AuthService(UserRepository(db), db)


def get_password_service(db: DbSession) -> PasswordService:
    return PasswordService(UserRepository(db), db)


def get_notification_service(db: DbSession) -> NotificationService:
    return NotificationService(NotificationRepository(db), UserRepository(db), db)


def get_complaint_service(
    db: DbSession,
    blob_store: BlobStore = Depends(get_storage),
) -> ComplaintService:
    notification_service = NotificationService(NotificationRepository(db), UserRepository(db), db)
    return ComplaintService(ComplaintRepository(db), notification_service, blob_store, db)


def get_analytics_service(db: DbSession) -> AnalyticsService:
    return AnalyticsService(ComplaintRepository(db), db)


def get_export_service(
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> ComplaintExportService:
    return ComplaintExportService(analytics_service)


def get_profile_service(
    db: DbSession,
    blob_store: BlobStore = Depends(get_storage),
) -> ProfileService:
    return ProfileService(UserRepository(db), blob_store, db)


# ------------------------------------------------------------------ #
# Current user
# ------------------------------------------------------------------ #
def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the bearer token to its user.

    Raises 401 when the header is missing, the token is invalid or expired,
    or the account no longer exists.
    """
    if not token:
        raise AuthenticationError("Not authenticated")
    user = unwrap_result(auth_service.current_user(token))
    user_id_var.set(user.id)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependency factory allowing only the given roles.

    Example:
        @router.get("/supervisor-updates")
        def updates(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    allowed = frozenset(roles)

    def dependency(user: CurrentUser) -> User:
        if user.role not in allowed:
            raise AuthorizationError(
                f"This action requires one of the roles: {', '.join(sorted(r.value for r in allowed))}"
            )
        return user

    return dependency


HandlerUser = Annotated[
    User,
    Depends(require_roles(UserRole.ADMIN, UserRole.SUPERVISOR, UserRole.MAINTENANCE)),
]
SubmitterUser = Annotated[User, Depends(require_roles(UserRole.STUDENT, UserRole.STAFF))]
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
