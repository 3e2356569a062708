"""Live feed and alert helpers for the infrastructure layer."""

from .alerts import AlertSink, LoggingAlertSink, WebSocketAlertSink
from .feed import EVENT_INSERT, FeedEvent, FeedHandle, LiveEventFeed

__all__ = [
    "AlertSink",
    "LoggingAlertSink",
    "WebSocketAlertSink",
    "EVENT_INSERT",
    "FeedEvent",
    "FeedHandle",
    "LiveEventFeed",
]
