"""
Notification repository: per-user inbox queries and bulk read/clear.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_portal.core.exceptions import RepositoryError
from complaint_portal.core.logging import get_logger
from complaint_portal.models.notification import Notification
from complaint_portal.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(Notification, db)

    def _for_user(self, user_id: str):
        return self.db.query(Notification).filter(Notification.user_id == user_id)

    def list_for_user(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        """Newest first."""
        try:
            query = self._for_user(user_id)
            if unread_only:
                query = query.filter(Notification.read.is_(False))
            return query.order_by(Notification.created_at.desc(), Notification.id).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"List notifications failed: {str(e)}") from e

    def find_for_user(self, notification_id: str, user_id: str) -> Optional[Notification]:
        return self._for_user(user_id).filter(Notification.id == notification_id).first()

    def unread_count(self, user_id: str) -> int:
        return self._for_user(user_id).filter(Notification.read.is_(False)).count()

    def mark_all_read(self, user_id: str, commit: bool = True) -> int:
        try:
            updated = (
                self._for_user(user_id)
                .filter(Notification.read.is_(False))
                .update({Notification.read: True}, synchronize_session=False)
            )
            self._finish(commit)
            logger.info(f"Marked {updated} notifications read for user {user_id}")
            return updated
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Mark all read failed: {str(e)}") from e

    def delete_all_for_user(self, user_id: str, commit: bool = True) -> int:
        try:
            deleted = self._for_user(user_id).delete(synchronize_session=False)
            self._finish(commit)
            logger.info(f"Cleared {deleted} notifications for user {user_id}")
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Clear notifications failed: {str(e)}") from e
