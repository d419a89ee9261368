"""Shared helper for notification event handlers.

Every handler follows the same pattern: render the template for the
notification type, then store one Notification for the recipient.
"""

import structlog
from notifications.notification.notification import Notification
from notifications.templates import get_template
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


def notify(recipient_id, notification_type: str, context: dict, source_event_type: str | None = None) -> str | None:
    """Render and store a notification. Returns its id, or None without a recipient."""
    if not recipient_id:
        logger.info("Notification skipped, no recipient", notification_type=notification_type)
        return None

    rendered = get_template(notification_type).render(context)
    notification = Notification.create(
        recipient_id=str(recipient_id),
        notification_type=notification_type,
        title=rendered["title"],
        message=rendered["message"],
        data=context,
        source_event_type=source_event_type,
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification created",
        recipient_id=str(recipient_id),
        notification_type=notification_type,
        notification_id=str(notification.id),
    )
    return str(notification.id)
