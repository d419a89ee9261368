"""Product listing — list, update and delist commands with their handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.trade.cascade import cancel_trades_referencing
from marketplace.trade.trade import OPEN_STATUSES

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class ListProduct:
    seller_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    images = Text(required=True)  # JSON list of image URLs
    category = String(required=True)
    unit_of_measurement = String(required=True)
    stock = Integer(required=True, min_value=0)
    freshness = String()
    available_for_trade = Boolean(default=False)


@marketplace.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    price = Float(min_value=0.0)
    images = Text()  # JSON list of image URLs
    category = String()
    unit_of_measurement = String()
    freshness = String()
    stock = Integer(min_value=0)


@marketplace.command(part_of="Product")
class DelistProduct:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@marketplace.command_handler(part_of=Product)
class ProductListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        product = Product.list_for_sale(
            seller_id=command.seller_id,
            name=command.name,
            description=command.description,
            price=command.price,
            images=json.loads(command.images),
            category=command.category,
            unit_of_measurement=command.unit_of_measurement,
            stock=command.stock,
            freshness=command.freshness,
            available_for_trade=command.available_for_trade,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product listed", product_id=str(product.id), seller_id=str(command.seller_id))
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            images=json.loads(command.images) if command.images else None,
            category=command.category,
            unit_of_measurement=command.unit_of_measurement,
            freshness=command.freshness,
            stock=command.stock,
        )
        repo.add(product)

    @handle(DelistProduct)
    def delist_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.delist()
        repo.add(product)

        cancel_trades_referencing(
            product.id,
            statuses=OPEN_STATUSES,
            reason="Product deleted",
            cancelled_by=command.seller_id,
        )
        logger.info("Product delisted", product_id=str(product.id))
