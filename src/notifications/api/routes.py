"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
Every route works on the caller's own feed.
"""

import json

from fastapi import APIRouter, Depends
from notifications.api.schemas import (
    MarkedCountResponse,
    MarkNotificationsReadRequest,
    NotificationListResponse,
    NotificationResponse,
    StatusResponse,
    UnreadCountResponse,
)
from notifications.notification.queries import latest_notifications, unread_count
from notifications.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    MarkNotificationsRead,
)
from protean.utils.globals import current_domain
from shared.access import Actor, current_actor

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _ts(value):
    return str(value) if value else None


@router.get("", response_model=NotificationListResponse)
async def list_notifications(actor: Actor = Depends(current_actor)) -> NotificationListResponse:
    """The caller's 50 most recent notifications, newest first."""
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                notification_id=str(n.id),
                notification_type=n.notification_type,
                title=n.title,
                message=n.message,
                data=n.payload,
                is_read=n.is_read,
                read_at=_ts(n.read_at),
                created_at=_ts(n.created_at),
            )
            for n in latest_notifications(actor.user_id)
        ]
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    notification_type: str | None = None, actor: Actor = Depends(current_actor)
) -> UnreadCountResponse:
    return UnreadCountResponse(count=unread_count(actor.user_id, notification_type))


@router.put("/read-all", response_model=MarkedCountResponse)
async def mark_all_read(
    notification_type: str | None = None, actor: Actor = Depends(current_actor)
) -> MarkedCountResponse:
    command = MarkAllNotificationsRead(recipient_id=actor.user_id, notification_type=notification_type)
    marked = current_domain.process(command, asynchronous=False)
    return MarkedCountResponse(marked=marked or 0)


@router.put("/read", response_model=MarkedCountResponse)
async def mark_matching_read(
    body: MarkNotificationsReadRequest, actor: Actor = Depends(current_actor)
) -> MarkedCountResponse:
    """Mark unread notifications of some types read, e.g. NEW_ORDER once an order was viewed."""
    command = MarkNotificationsRead(
        recipient_id=actor.user_id,
        notification_types=json.dumps(body.notification_types),
        order_id=body.order_id,
    )
    marked = current_domain.process(command, asynchronous=False)
    return MarkedCountResponse(marked=marked or 0)


@router.put("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, recipient_id=actor.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
