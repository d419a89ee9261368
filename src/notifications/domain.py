"""Notifications bounded context — in-app notifications for every AgriMarket user.

Consumes events from Marketplace (orders and trades), Crowdfunding
(investments) and Logistics (shipments), renders a short title and message
per notification type and stores one notification per recipient. Users read
their feed, see an unread count and mark notifications as read.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="notifications")

logger = get_logger(__name__)

notifications = Domain(name="notifications")
