"""Logistics bounded context — couriers, shipping rates and shipments.

Each order gets exactly one shipment once it is confirmed. The shipment is
the single source of truth for where the goods are; the marketplace follows
its events to move the order through Processing, Shipped and Delivered.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="logistics")

logger = get_logger(__name__)

logistics = Domain(name="logistics")
