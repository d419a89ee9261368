"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class MarkNotificationsReadRequest(BaseModel):
    notification_types: list[str] = Field(..., min_length=1, examples=[["NEW_ORDER"]])
    order_id: str | None = Field(default=None, description="Only mark notifications about this order")


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class MarkedCountResponse(BaseModel):
    marked: int


class NotificationResponse(BaseModel):
    notification_id: str
    notification_type: str
    title: str
    message: str
    data: dict[str, Any] = {}
    is_read: bool
    read_at: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]


class UnreadCountResponse(BaseModel):
    count: int
