from smartconnect.notifications.store import Notification, NotificationStore

__all__ = ["Notification", "NotificationStore"]
