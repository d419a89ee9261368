"""Handing reserved units back to products."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.product.product import Product

logger = structlog.get_logger(__name__)


def release_units(released):
    """Return stock for each ``(product_id, quantity)`` pair.

    Products that no longer exist are skipped with a warning; a soft-deleted
    product still gets its units back.
    """
    repo = current_domain.repository_for(Product)
    for product_id, quantity in released:
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            logger.warning("Reserved product no longer exists", product_id=str(product_id), quantity=quantity)
            continue
        product.release_stock(quantity)
        repo.add(product)
