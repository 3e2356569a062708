"""Endpoints and websocket handler for the notification centre."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from pydantic import ValidationError

from trana.application.notifications import (
    NotificationCenter,
    format_relative_time,
    format_unread_badge,
    notification_icon,
)
from trana.domain.entities import Notification
from trana.domain.exceptions import RemoteTableError
from trana.infrastructure.notifications import LiveEventFeed, WebSocketAlertSink
from trana.infrastructure.remote_table import NotificationTable
from trana.interfaces.api.dependencies import (
    get_notification_center,
    get_notification_feed,
    get_notification_table,
)
from trana.interfaces.api.schemas import (
    NotificationCreate,
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
)
from trana.utils import now_in_app_timezone

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(
    notification: Notification, *, now: datetime | None = None
) -> NotificationRead:
    created_at = notification.created_at or now_in_app_timezone()
    icon = notification_icon(notification.type)
    return NotificationRead(
        id=notification.id or "",
        type=notification.type,
        title=notification.title,
        message=notification.message,
        user_id=notification.user_id,
        data=notification.data or {},
        is_read=notification.is_read,
        created_at=created_at,
        relative_time=format_relative_time(created_at, now),
        icon=icon.name,
        urgency=icon.urgency,
    )


def _snapshot_to_schema(
    notifications: list[Notification], unread_count: int
) -> NotificationListRead:
    now = now_in_app_timezone()
    return NotificationListRead(
        notifications=[_notification_to_schema(n, now=now) for n in notifications],
        unread_count=unread_count,
        unread_badge=format_unread_badge(unread_count),
    )


def _center_to_schema(center: NotificationCenter) -> NotificationListRead:
    return _snapshot_to_schema(center.notifications, center.unread_count)


def _remote_failure(exc: RemoteTableError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/", response_model=NotificationListRead)
async def list_notifications(
    refresh: bool = Query(False, description="Pull from the table before answering"),
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationListRead:
    """Return the newest notifications together with the unread counter."""

    if refresh:
        try:
            await center.refresh()
        except RemoteTableError as exc:
            raise _remote_failure(exc) from exc
    else:
        await center.engine.settle()
    return _center_to_schema(center)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    payload: NotificationCreate,
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationRead:
    """Store a notification and announce it to every live subscriber."""

    try:
        saved = await center.send_notification(
            payload.type,
            payload.title,
            payload.message,
            user_id=payload.user_id,
            data=payload.data,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except RemoteTableError as exc:
        raise _remote_failure(exc) from exc
    return _notification_to_schema(saved)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_as_read(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    """Mark one notification as read; unknown identifiers are accepted."""

    try:
        await center.mark_as_read(notification_id)
    except RemoteTableError as exc:
        raise _remote_failure(exc) from exc
    await center.engine.settle()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    table: NotificationTable = Depends(get_notification_table),
    feed: LiveEventFeed = Depends(get_notification_feed),
) -> None:
    """Stream snapshots and alerts to one dashboard client.

    Every connection gets its own notification centre, which is closed as
    soon as the socket goes away.
    """

    await websocket.accept()
    sink = WebSocketAlertSink(websocket)
    center = NotificationCenter(table, feed, alert_sink=sink)

    def push_snapshot(snapshot: list[Notification]) -> None:
        sink.push(
            {
                "type": "snapshot",
                "data": _snapshot_to_schema(snapshot, center.unread_count).model_dump(
                    mode="json"
                ),
            }
        )

    try:
        async with center:
            sent = center.notifications
            await websocket.send_json(
                {"type": "init", "data": _center_to_schema(center).model_dump(mode="json")}
            )
            # Snapshots only follow init; catch up on a pull that finished meanwhile.
            center.add_listener(push_snapshot)
            if center.notifications != sent:
                push_snapshot(center.notifications)
            while True:
                raw = await websocket.receive_text()
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    await websocket.send_json({"type": "error", "detail": "Invalid JSON"})
                    continue
                if not isinstance(message, dict):
                    continue
                await _handle_client_message(websocket, center, message)
    except WebSocketDisconnect:
        logger.debug("Notification websocket disconnected")


async def _handle_client_message(
    websocket: WebSocket, center: NotificationCenter, message: dict[str, Any]
) -> None:
    message_type = message.get("type")
    if message_type == "ping":
        await websocket.send_json({"type": "pong"})
        return

    if message_type == "refresh":
        try:
            await center.refresh()
        except RemoteTableError as exc:
            await websocket.send_json({"type": "error", "detail": str(exc)})
        return

    if message_type == "ack":
        try:
            request = NotificationMarkReadRequest.model_validate(message)
        except ValidationError:
            await websocket.send_json({"type": "error", "detail": "Invalid ack payload"})
            return
        ids = request.unique_ids()
        results = await asyncio.gather(
            *(center.mark_as_read(notification_id) for notification_id in ids),
            return_exceptions=True,
        )
        failed = [
            notification_id
            for notification_id, result in zip(ids, results)
            if isinstance(result, Exception)
        ]
        for result in results:
            if isinstance(result, Exception) and not isinstance(result, RemoteTableError):
                raise result
        if failed:
            await websocket.send_json(
                {"type": "error", "detail": "Could not mark as read", "ids": failed}
            )
        return

    await websocket.send_json({"type": "error", "detail": f"Unknown message type: {message_type}"})
