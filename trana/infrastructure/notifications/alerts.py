"""Sinks receiving the transient alerts raised for live notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Fire-and-forget receiver of ``(title, message)`` alerts."""

    def __call__(self, title: str, message: str) -> None: ...


class LoggingAlertSink:
    """Write alerts to the application log."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def __call__(self, title: str, message: str) -> None:
        logger.log(self._level, "Notification alert: %s - %s", title, message)


class WebSocketAlertSink:
    """Forward alerts, and any other payload, to one websocket client."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._tasks: set[asyncio.Task[None]] = set()

    def __call__(self, title: str, message: str) -> None:
        self.push({"type": "alert", "data": {"title": title, "message": message}})

    def push(self, payload: dict[str, Any]) -> None:
        """Schedule ``payload`` to be sent without waiting for delivery."""

        task = asyncio.get_running_loop().create_task(self._send(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, payload: dict[str, Any]) -> None:
        try:
            await self._websocket.send_json(payload)
        except Exception:
            logger.warning(
                "Could not deliver %s message to websocket client",
                payload.get("type"),
                exc_info=True,
            )


__all__ = ["AlertSink", "LoggingAlertSink", "WebSocketAlertSink"]
