"""Customer notification dispatch and in-app notifications."""
from .dispatcher import NotificationChannel, NotificationDispatcher
from .notification_service import NotificationService

__all__ = ["NotificationChannel", "NotificationDispatcher", "NotificationService"]
