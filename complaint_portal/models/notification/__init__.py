from complaint_portal.models.notification.notification import Notification

__all__ = ["Notification"]
