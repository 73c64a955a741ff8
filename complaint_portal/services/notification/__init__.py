from complaint_portal.services.notification.notification_service import NotificationService

__all__ = ["NotificationService"]
