"""Display helpers shared by the API serializers."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from trana.domain.entities import (
    NOTIFICATION_TYPE_APPOINTMENT,
    NOTIFICATION_TYPE_EMERGENCY,
    NOTIFICATION_TYPE_SYSTEM,
)
from trana.utils import ensure_app_timezone, now_in_app_timezone

BADGE_OVERFLOW = 99


class NotificationIcon(NamedTuple):
    name: str
    urgency: str


_DEFAULT_ICON = NotificationIcon("bell", "normal")
_ICONS: dict[str, NotificationIcon] = {
    NOTIFICATION_TYPE_EMERGENCY: NotificationIcon("alert-triangle", "critical"),
    NOTIFICATION_TYPE_APPOINTMENT: NotificationIcon("calendar", "normal"),
    NOTIFICATION_TYPE_SYSTEM: NotificationIcon("activity", "low"),
}


def notification_icon(notification_type: str) -> NotificationIcon:
    """Return the icon and urgency used to render ``notification_type``."""

    return _ICONS.get(notification_type, _DEFAULT_ICON)


def format_relative_time(created_at: datetime, now: datetime | None = None) -> str:
    """Describe how long ago ``created_at`` happened.

    Anything older than a day is shown as its calendar date.
    """

    created = ensure_app_timezone(created_at)
    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    minutes = int((current - created).total_seconds() // 60)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 24 * 60:
        return f"{minutes // 60}h ago"
    return created.date().isoformat()


def format_unread_badge(count: int) -> str | None:
    if count <= 0:
        return None
    if count > BADGE_OVERFLOW:
        return f"{BADGE_OVERFLOW}+"
    return str(count)


__all__ = [
    "NotificationIcon",
    "format_relative_time",
    "format_unread_badge",
    "notification_icon",
]
