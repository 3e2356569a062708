"""In-memory snapshot of the notifications shown by one context."""

from __future__ import annotations

from collections.abc import Iterable

from trana.config import PULL_LIMIT
from trana.domain.entities import Notification


class NotificationStore:
    """Hold the newest-first notification window.

    The collection is only ever replaced as a whole; the unread counter is
    recomputed from the current snapshot on every call.
    """

    def __init__(self, capacity: int = PULL_LIMIT) -> None:
        if capacity <= 0:
            raise ValueError("Store capacity must be positive")
        self.capacity = capacity
        self._records: tuple[Notification, ...] = ()

    @property
    def notifications(self) -> list[Notification]:
        return list(self._records)

    def replace_all(self, records: Iterable[Notification]) -> None:
        snapshot = tuple(records)
        if len(snapshot) > self.capacity:
            raise ValueError(
                f"Snapshot of {len(snapshot)} notifications exceeds the window of {self.capacity}"
            )
        self._records = snapshot

    def unread_count(self) -> int:
        return sum(1 for record in self._records if not record.is_read)

    def get(self, notification_id: str) -> Notification | None:
        for record in self._records:
            if record.id == notification_id:
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["NotificationStore"]
