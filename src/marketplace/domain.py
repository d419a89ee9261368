"""Marketplace bounded context — catalogue, stock, carts, orders and trades.

Every aggregate that touches product stock lives here so that a command
handler can mutate several of them inside a single Unit of Work: reserving
stock for a cart line, restoring it when an order is rejected, or deducting
both sides of a completed trade commit together or not at all.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="marketplace")

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")
