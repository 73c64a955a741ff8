from complaint_portal.repositories.notification.notification_repository import NotificationRepository

__all__ = ["NotificationRepository"]
