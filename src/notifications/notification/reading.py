"""Read-state commands — a recipient marks one, some or all notifications read."""

import json

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    recipient_id = Identifier(required=True)
    notification_type = String(max_length=50)


@notifications.command(part_of="Notification")
class MarkNotificationsRead:
    """Mark unread notifications of the given types read, optionally for one order only."""

    recipient_id = Identifier(required=True)
    notification_types = Text(required=True)  # JSON list of NotificationType values
    order_id = Identifier()


def unread_for(recipient_id, notification_type=None):
    filters = {"recipient_id": str(recipient_id), "is_read": False}
    if notification_type:
        filters["notification_type"] = notification_type
    return current_domain.repository_for(Notification)._dao.query.filter(**filters).limit(None).all().items


@notifications.command_handler(part_of=Notification)
class NotificationReadingHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        if str(notification.recipient_id) != str(command.recipient_id):
            raise ObjectNotFoundError(f"Notification {command.notification_id} not found")
        notification.mark_read()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        unread = unread_for(command.recipient_id, command.notification_type)
        self._mark(unread)
        logger.info("Notifications marked read", recipient_id=str(command.recipient_id), count=len(unread))
        return len(unread)

    @handle(MarkNotificationsRead)
    def mark_matching_read(self, command: MarkNotificationsRead):
        types = set(json.loads(command.notification_types))
        matching = [n for n in unread_for(command.recipient_id) if n.notification_type in types]
        if command.order_id:
            matching = [n for n in matching if n.refers_to_order(command.order_id)]
        self._mark(matching)
        return len(matching)

    def _mark(self, notifications_to_mark):
        repo = current_domain.repository_for(Notification)
        for notification in notifications_to_mark:
            notification.mark_read()
            repo.add(notification)
