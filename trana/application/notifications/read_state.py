"""Mark notifications as read and let the sync engine report the result."""

from __future__ import annotations

import logging

from trana.application.notifications.sync_engine import RemoteTable, SyncEngine
from trana.infrastructure.remote_table import UpdateOutcome

logger = logging.getLogger(__name__)


class ReadStateMutator:
    """Send read updates to the table without touching the local snapshot.

    The store only learns about the new state through the pull scheduled
    after the table confirmed the update.
    """

    def __init__(self, table: RemoteTable, engine: SyncEngine) -> None:
        self._table = table
        self._engine = engine
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of mark-as-read requests still waiting for the table."""

        return self._pending

    async def mark_as_read(self, notification_id: str) -> UpdateOutcome:
        """Flag ``notification_id`` as read.

        Unknown identifiers are treated as already handled. Table failures
        propagate as :class:`RemoteTableError` and no pull is scheduled.
        """

        if not notification_id:
            raise ValueError("A notification id is required")

        self._pending += 1
        try:
            outcome = await self._table.update(notification_id, {"is_read": True})
        finally:
            self._pending -= 1

        if outcome is UpdateOutcome.NOT_FOUND:
            logger.info("Notification %s not found while marking it as read", notification_id)
        self._engine.schedule_pull()
        return outcome


__all__ = ["ReadStateMutator"]
