"""Notification read-side helpers — the feed and the unread badge."""

from notifications.notification.notification import Notification
from notifications.notification.reading import unread_for
from protean.utils.globals import current_domain

FEED_LIMIT = 50


def latest_notifications(recipient_id, limit=FEED_LIMIT):
    """The most recent notifications for a recipient, newest first."""
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=str(recipient_id))
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )


def unread_count(recipient_id, notification_type=None):
    return len(unread_for(recipient_id, notification_type))
