"""Errors raised by the notification core."""


class NotificationError(Exception):
    """Base class for notification centre failures."""


class RemoteTableError(NotificationError):
    """A select, update or insert against the notifications table failed."""


class SubscriptionError(NotificationError):
    """The live event feed could not be subscribed to."""


class SyncClosedError(NotificationError):
    """The sync engine was torn down before the requested pull could run."""


__all__ = [
    "NotificationError",
    "RemoteTableError",
    "SubscriptionError",
    "SyncClosedError",
]
