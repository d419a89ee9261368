"""Notification aggregate — one message in a user's in-app feed.

Notifications are created reactively from cross-domain events and carry a
rendered title and message plus a small JSON payload (order, trade or
investment id, status) that the client uses to link back to the source.
A notification starts unread and can only move to read.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRead
from protean.fields import Boolean, DateTime, Identifier, String, Text


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    # Orders
    ORDER_STATUS = "ORDER_STATUS"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    ORDER_REJECTED = "ORDER_REJECTED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    NEW_ORDER = "NEW_ORDER"
    # Trades and investments
    TRADE_UPDATE = "TRADE_UPDATE"
    INVESTMENT_UPDATE = "INVESTMENT_UPDATE"
    PAYMENT_CONFIRMATION = "PAYMENT_CONFIRMATION"
    # Campaign Q&A
    NEW_QUESTION = "NEW_QUESTION"
    NEW_REPLY = "NEW_REPLY"
    # Shipping
    SHIPPING_ASSIGNED = "SHIPPING_ASSIGNED"
    SHIPPING_UPDATE = "SHIPPING_UPDATE"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A single notification addressed to one recipient."""

    recipient_id = Identifier(required=True)
    notification_type = String(choices=NotificationType, required=True)

    # Content
    title = String(required=True, max_length=200)
    message = Text(required=True)
    data = Text()  # JSON payload linking back to the source entity

    # Source event correlation
    source_event_type = String(max_length=200)

    # Read state
    is_read = Boolean(default=False)
    read_at = DateTime()

    created_at = DateTime()

    @classmethod
    def create(cls, recipient_id, notification_type, title, message, data=None, source_event_type=None):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            data=json.dumps(data or {}),
            source_event_type=source_event_type,
            is_read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                title=title,
                source_event_type=source_event_type,
                created_at=now,
            )
        )
        return notification

    @property
    def payload(self) -> dict:
        return json.loads(self.data) if self.data else {}

    def refers_to_order(self, order_id) -> bool:
        return str(self.payload.get("order_id")) == str(order_id)

    def mark_read(self):
        """Mark as read. Reading an already read notification changes nothing."""
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )
