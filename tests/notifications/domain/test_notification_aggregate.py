"""Domain tests for the Notification aggregate."""

import pytest
from notifications.notification.events import NotificationCreated, NotificationRead
from notifications.notification.notification import Notification, NotificationType
from protean.exceptions import ValidationError


def _make_notification(**overrides):
    defaults = {
        "recipient_id": "buyer-001",
        "notification_type": NotificationType.ORDER_CONFIRMED.value,
        "title": "Order Confirmed",
        "message": "Your order #ord-001 has been confirmed.",
        "data": {"order_id": "ord-001", "status": "Confirmed"},
        "source_event_type": "Marketplace.OrderConfirmed.v1",
    }
    defaults.update(overrides)
    return Notification.create(**defaults)


class TestCreate:
    def test_starts_unread(self):
        notification = _make_notification()
        assert notification.is_read is False
        assert notification.read_at is None
        assert notification.created_at is not None

    def test_payload_round_trips(self):
        notification = _make_notification()
        assert notification.payload == {"order_id": "ord-001", "status": "Confirmed"}

    def test_empty_payload(self):
        assert _make_notification(data=None).payload == {}

    def test_raises_created_event(self):
        notification = _make_notification()
        event = notification._events[-1]
        assert isinstance(event, NotificationCreated)
        assert event.recipient_id == "buyer-001"
        assert event.source_event_type == "Marketplace.OrderConfirmed.v1"

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_notification(notification_type="SMOKE_SIGNAL")

    def test_title_is_required(self):
        with pytest.raises(ValidationError):
            _make_notification(title=None)


class TestOrderReference:
    def test_refers_to_its_order(self):
        notification = _make_notification()
        assert notification.refers_to_order("ord-001") is True
        assert notification.refers_to_order("ord-002") is False

    def test_without_order_in_payload(self):
        notification = _make_notification(data={"trade_id": "trade-001"})
        assert notification.refers_to_order("ord-001") is False


class TestMarkRead:
    def test_mark_read(self):
        notification = _make_notification()
        notification.mark_read()

        assert notification.is_read is True
        assert notification.read_at is not None
        assert isinstance(notification._events[-1], NotificationRead)

    def test_mark_read_twice_keeps_first_timestamp(self):
        notification = _make_notification()
        notification.mark_read()
        first = notification.read_at
        notification.mark_read()

        assert notification.read_at == first
        assert len([e for e in notification._events if isinstance(e, NotificationRead)]) == 1
