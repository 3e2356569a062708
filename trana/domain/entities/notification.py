"""Domain entity representing a dashboard notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_EMERGENCY = "emergency"
NOTIFICATION_TYPE_APPOINTMENT = "appointment"
NOTIFICATION_TYPE_SYSTEM = "system"
NOTIFICATION_TYPE_ALERT = "alert"

NOTIFICATION_TYPES: tuple[str, ...] = (
    NOTIFICATION_TYPE_EMERGENCY,
    NOTIFICATION_TYPE_APPOINTMENT,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPE_ALERT,
)


@dataclass
class Notification:
    """Message shown in the notification centre.

    ``user_id`` is ``None`` for broadcast notifications. ``data`` carries
    arbitrary context for the producer and is never interpreted here.
    """

    id: str | None
    type: str
    title: str
    message: str
    user_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None


__all__ = [
    "NOTIFICATION_TYPE_EMERGENCY",
    "NOTIFICATION_TYPE_APPOINTMENT",
    "NOTIFICATION_TYPE_SYSTEM",
    "NOTIFICATION_TYPE_ALERT",
    "NOTIFICATION_TYPES",
    "Notification",
]
