"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

NotificationType = Literal["emergency", "appointment", "system", "alert"]


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for notification_id in self.ids:
            if not notification_id or notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationCreate(BaseModel):
    """Payload for publishing a new notification."""

    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    user_id: str | None = Field(default=None, max_length=36)
    data: dict[str, Any] = Field(default_factory=dict)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: str
    title: str
    message: str
    user_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime
    relative_time: str
    icon: str
    urgency: str


class NotificationListRead(BaseModel):
    """Snapshot of the notification centre."""

    notifications: list[NotificationRead]
    unread_count: int
    unread_badge: str | None = None


__all__ = [
    "NotificationCreate",
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
]
