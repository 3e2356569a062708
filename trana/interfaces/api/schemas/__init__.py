from .notification import (
    NotificationCreate,
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
)

__all__ = [
    "NotificationCreate",
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
]
