"""Notification centre: snapshot store, sync engine and read-state mutator."""

from .center import NotificationCenter
from .presentation import (
    NotificationIcon,
    format_relative_time,
    format_unread_badge,
    notification_icon,
)
from .read_state import ReadStateMutator
from .store import NotificationStore
from .sync_engine import LiveSubscription, RemoteTable, SyncEngine

__all__ = [
    "LiveSubscription",
    "NotificationCenter",
    "NotificationIcon",
    "NotificationStore",
    "ReadStateMutator",
    "RemoteTable",
    "SyncEngine",
    "format_relative_time",
    "format_unread_badge",
    "notification_icon",
]
