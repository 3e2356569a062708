"""FastAPI dependency utilities."""

from typing import Any

from fastapi import HTTPException, status
from fastapi.requests import HTTPConnection

from trana.application.notifications import NotificationCenter
from trana.infrastructure.notifications import LiveEventFeed
from trana.infrastructure.remote_table import NotificationTable


def _state_attribute(connection: HTTPConnection, name: str) -> Any:
    value = getattr(connection.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification service is not ready",
        )
    return value


def get_notification_center(connection: HTTPConnection) -> NotificationCenter:
    """Return the application-wide notification centre."""

    return _state_attribute(connection, "notification_center")


def get_notification_table(connection: HTTPConnection) -> NotificationTable:
    return _state_attribute(connection, "notification_table")


def get_notification_feed(connection: HTTPConnection) -> LiveEventFeed:
    return _state_attribute(connection, "notification_feed")
