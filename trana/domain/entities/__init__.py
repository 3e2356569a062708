"""Domain entities exposed by the application."""

from .notification import (
    NOTIFICATION_TYPE_ALERT,
    NOTIFICATION_TYPE_APPOINTMENT,
    NOTIFICATION_TYPE_EMERGENCY,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPES,
    Notification,
)

__all__ = [
    "NOTIFICATION_TYPE_ALERT",
    "NOTIFICATION_TYPE_APPOINTMENT",
    "NOTIFICATION_TYPE_EMERGENCY",
    "NOTIFICATION_TYPE_SYSTEM",
    "NOTIFICATION_TYPES",
    "Notification",
]
