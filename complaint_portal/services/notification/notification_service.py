"""
Notification service: inbox operations and complaint fan-out.

Fan-out helpers only stage rows in the caller's session (``commit=False``)
so notifications commit or roll back together with the complaint change
that triggered them.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from complaint_portal.models.base.enums import UserRole
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.notification import Notification
from complaint_portal.models.user import User
from complaint_portal.repositories.notification import NotificationRepository
from complaint_portal.repositories.user import UserRepository
from complaint_portal.schemas.notification import NotificationResponse
from complaint_portal.services.base import BaseService, ServiceResult

HANDLER_FANOUT_ROLES = (UserRole.ADMIN, UserRole.SUPERVISOR)


class NotificationService(BaseService[Notification, NotificationRepository]):
    def __init__(
        self,
        notification_repository: NotificationRepository,
        user_repository: UserRepository,
        db_session: Session,
    ):
        super().__init__(notification_repository, db_session)
        self.user_repository = user_repository

    # -------------------------------------------------------------------------
    # Fan-out
    # -------------------------------------------------------------------------

    @staticmethod
    def _build(
        user_id: str,
        message: str,
        complaint: Optional[Complaint],
        updated_by: Optional[str],
    ) -> Notification:
        return Notification(
            user_id=user_id,
            message=message,
            complaint_id=complaint.id if complaint else None,
            complaint_title=complaint.title if complaint else None,
            category=complaint.category.value if complaint else None,
            read=False,
            updated_by=updated_by,
        )

    def notify_users(
        self,
        user_ids: Iterable[str],
        message: str,
        complaint: Optional[Complaint] = None,
        updated_by: Optional[str] = None,
        commit: bool = False,
    ) -> List[Notification]:
        """Stage one notification per recipient; duplicates are collapsed."""
        recipients = list(dict.fromkeys(user_ids))
        notifications = [self._build(uid, message, complaint, updated_by) for uid in recipients]
        return self.repository.create_many(notifications, commit=commit)

    def notify_handlers(
        self,
        message: str,
        complaint: Complaint,
        updated_by: Optional[str] = None,
        commit: bool = False,
    ) -> List[Notification]:
        """Notify every admin and every supervisor."""
        handlers = self.user_repository.find_by_roles(HANDLER_FANOUT_ROLES)
        notifications = self.notify_users(
            (user.id for user in handlers), message, complaint, updated_by, commit=commit
        )
        self._logger.info(
            f"Fanned out {len(notifications)} notifications for complaint {complaint.id}",
            extra={"complaint_id": complaint.id},
        )
        return notifications

    # -------------------------------------------------------------------------
    # Inbox
    # -------------------------------------------------------------------------

    def list_for_user(self, user: User, unread_only: bool = False) -> ServiceResult[List[NotificationResponse]]:
        try:
            rows = self.repository.list_for_user(user.id, unread_only=unread_only)
            return ServiceResult.success(
                [NotificationResponse.model_validate(row) for row in rows],
                metadata={"count": len(rows)},
            )
        except Exception as e:
            return self._handle_exception(e, "list notifications", user.id)

    def unread_count(self, user: User) -> ServiceResult[int]:
        try:
            return ServiceResult.success(self.repository.unread_count(user.id))
        except Exception as e:
            return self._handle_exception(e, "count notifications", user.id)

    def mark_read(self, user: User, notification_id: str) -> ServiceResult[NotificationResponse]:
        try:
            notification = self.repository.find_for_user(notification_id, user.id)
            if notification is None:
                return ServiceResult.not_found("Notification", notification_id)
            if not notification.read:
                self.repository.update(notification, {"read": True})
            return ServiceResult.success(NotificationResponse.model_validate(notification))
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "mark notification read", notification_id)

    def mark_all_read(self, user: User) -> ServiceResult[int]:
        try:
            return ServiceResult.success(self.repository.mark_all_read(user.id))
        except Exception as e:
            return self._handle_exception(e, "mark notifications read", user.id)

    def clear_all(self, user: User) -> ServiceResult[int]:
        try:
            return ServiceResult.success(self.repository.delete_all_for_user(user.id))
        except Exception as e:
            return self._handle_exception(e, "clear notifications", user.id)
