"""Product aggregate — a seller's listing and the stock it carries.

Stock is the one number every other marketplace flow leans on: carts reserve
it, orders consume or restore it, and trades deduct it on both sides. All of
those go through ``reserve_stock`` / ``release_stock`` so the ``stock >= 0``
rule and the derived ``is_active`` flag live in one place.

Products are never physically removed. Delisting flips ``is_deleted`` and
keeps the record around for order snapshots and trade history.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.product.events import (
    ProductDelisted,
    ProductListed,
    ProductUpdated,
    TradeAvailabilityChanged,
)
from shared.access import AccessDenied


class ProductCategory(Enum):
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    GRAINS = "Grains"
    ROOT_CROPS = "Root Crops"
    HERBS = "Herbs"
    OTHERS = "Others"


class Freshness(Enum):
    FRESH = "Fresh"
    DAY_OLD = "Day-old"
    STORED = "Stored"
    PROCESSED = "Processed"


class UnitOfMeasurement(Enum):
    KG = "kg"
    G = "g"
    PC = "pc"
    BUNDLE = "bundle"
    PACK = "pack"
    LBS = "lbs"
    OZ = "oz"


# Fields a seller may change after listing
_EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "images",
    "category",
    "freshness",
    "unit_of_measurement",
    "stock",
)


@marketplace.value_object(part_of="Product")
class ProductOrigin:
    """Back-link from a trade-derived product to the listing it was minted from."""

    trade_id = Identifier(required=True)
    original_product_id = Identifier(required=True)
    original_seller_id = Identifier(required=True)
    acquired_at = DateTime()


@marketplace.entity(part_of="Product")
class TradeHistoryEntry:
    trade_id = Identifier(required=True)
    traded_from = Identifier(required=True)
    traded_to = Identifier(required=True)
    new_owner = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    recorded_at = DateTime()


@marketplace.aggregate
class Product:
    name = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    images = Text(required=True)  # JSON list of image URLs
    category = String(required=True, choices=ProductCategory)
    freshness = String(choices=Freshness, default=Freshness.FRESH.value)
    unit_of_measurement = String(required=True, choices=UnitOfMeasurement)
    stock = Integer(required=True, min_value=0)
    is_active = Boolean(default=True)
    available_for_trade = Boolean(default=False)
    seller_id = Identifier(required=True)
    origin = ValueObject(ProductOrigin)
    trade_history = HasMany(TradeHistoryEntry)
    is_deleted = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def must_have_at_least_one_image(self):
        if not self.image_urls:
            raise ValidationError({"images": ["At least one image is required"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def list_for_sale(
        cls,
        seller_id,
        name,
        description,
        price,
        images,
        category,
        unit_of_measurement,
        stock,
        freshness=Freshness.FRESH.value,
        available_for_trade=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            seller_id=seller_id,
            name=name,
            description=description,
            price=price,
            images=json.dumps(list(images or [])),
            category=category,
            freshness=freshness or Freshness.FRESH.value,
            unit_of_measurement=unit_of_measurement,
            stock=stock,
            is_active=stock > 0,
            available_for_trade=available_for_trade,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                seller_id=str(seller_id),
                name=name,
                price=price,
                category=category,
                stock=stock,
                listed_at=now,
            )
        )
        return product

    @property
    def image_urls(self) -> list:
        return json.loads(self.images) if self.images else []

    @property
    def primary_image(self):
        urls = self.image_urls
        return urls[0] if urls else None

    def assert_owned_by(self, seller_id):
        if str(self.seller_id) != str(seller_id):
            raise AccessDenied("Only the product's seller can do that")

    def _assert_listed(self):
        if self.is_deleted:
            raise ValidationError({"product": ["Product has been deleted"]})

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity):
        """Take ``quantity`` units out of stock, refusing to go below zero."""
        self._assert_listed()
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if self.stock < quantity:
            raise ValidationError(
                {"stock": [f"Insufficient stock for {self.name}: {self.stock} available, {quantity} requested"]}
            )
        self.stock -= quantity
        self._sync_activity()

    def release_stock(self, quantity):
        """Put ``quantity`` units back into stock."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self.stock += quantity
        self._sync_activity()

    def _sync_activity(self):
        self.is_active = self.stock > 0 and not self.is_deleted
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Listing maintenance
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        self._assert_listed()
        applied = {}
        for field_name in _EDITABLE_FIELDS:
            value = changes.get(field_name)
            if value is None:
                continue
            if field_name == "images":
                value = json.dumps(list(value))
            setattr(self, field_name, value)
            applied[field_name] = value

        if not applied:
            return

        if "stock" in applied:
            self.is_active = self.stock > 0
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                changed_fields=json.dumps(sorted(applied)),
                updated_at=self.updated_at,
            )
        )

    def delist(self):
        if self.is_deleted:
            raise ValidationError({"product": ["Product is already deleted"]})
        now = datetime.now(UTC)
        self.is_deleted = True
        self.is_active = False
        self.available_for_trade = False
        self.updated_at = now
        self.raise_(
            ProductDelisted(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                delisted_at=now,
            )
        )

    def set_trade_availability(self, available):
        self._assert_listed()
        if available and self.stock < 1:
            raise ValidationError({"stock": ["Out-of-stock products cannot be offered for trade"]})
        if bool(self.available_for_trade) == bool(available):
            return
        self.available_for_trade = available
        self.updated_at = datetime.now(UTC)
        self.raise_(
            TradeAvailabilityChanged(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                available_for_trade=available,
                changed_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Trades
    # -------------------------------------------------------------------
    def hand_over_for_trade(self, trade_id, quantity, traded_to, traded_from):
        """Deduct traded units and log the trade on this listing."""
        self.reserve_stock(quantity)
        if self.stock == 0:
            self.available_for_trade = False
        self.add_trade_history(
            TradeHistoryEntry(
                trade_id=trade_id,
                traded_from=traded_from,
                traded_to=traded_to,
                new_owner=traded_to,
                quantity=quantity,
                recorded_at=datetime.now(UTC),
            )
        )

    def derive_for(self, new_owner_id, quantity, trade_id):
        """Mint a new listing owned by ``new_owner_id`` carrying ``quantity`` units of this product."""
        now = datetime.now(UTC)
        derived = Product(
            seller_id=new_owner_id,
            name=self.name,
            description=self.description,
            price=self.price,
            images=self.images,
            category=self.category,
            freshness=self.freshness,
            unit_of_measurement=self.unit_of_measurement,
            stock=quantity,
            is_active=quantity > 0,
            available_for_trade=False,
            origin=ProductOrigin(
                trade_id=trade_id,
                original_product_id=str(self.id),
                original_seller_id=str(self.seller_id),
                acquired_at=now,
            ),
            created_at=now,
            updated_at=now,
        )
        derived.raise_(
            ProductListed(
                product_id=str(derived.id),
                seller_id=str(new_owner_id),
                name=derived.name,
                price=derived.price,
                category=derived.category,
                stock=quantity,
                origin_trade_id=trade_id,
                listed_at=now,
            )
        )
        return derived
