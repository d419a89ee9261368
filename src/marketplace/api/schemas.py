"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


class AddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    zipcode: str
    country: str
    phone: str | None = None


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ListProductRequest(BaseModel):
    name: str
    description: str
    price: float = Field(ge=0)
    images: list[str] = Field(min_length=1)
    category: str
    unit_of_measurement: str
    stock: int = Field(ge=0)
    freshness: str = "Fresh"
    available_for_trade: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Organic Tomatoes",
                    "description": "Vine-ripened, picked this morning",
                    "price": 3.5,
                    "images": ["https://cdn.example.com/tomatoes.jpg"],
                    "category": "Vegetables",
                    "unit_of_measurement": "kg",
                    "stock": 40,
                    "freshness": "Fresh",
                    "available_for_trade": True,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    images: list[str] | None = None
    category: str | None = None
    unit_of_measurement: str | None = None
    stock: int | None = Field(default=None, ge=0)
    freshness: str | None = None


class ProductOriginResponse(BaseModel):
    trade_id: str
    original_product_id: str
    original_seller_id: str
    acquired_at: str | None = None


class ProductResponse(BaseModel):
    product_id: str
    seller_id: str
    name: str
    description: str | None = None
    price: float
    images: list[str]
    category: str
    freshness: str
    unit_of_measurement: str
    stock: int
    is_active: bool
    available_for_trade: bool
    origin: ProductOriginResponse | None = None
    created_at: str | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class TradeHistoryEntryResponse(BaseModel):
    trade_id: str
    traded_from: str
    traded_to: str
    new_owner: str
    quantity: int
    recorded_at: str | None = None


class ProductTradeHistoryResponse(BaseModel):
    product_id: str
    entries: list[TradeHistoryEntryResponse]


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartItemResponse(BaseModel):
    product_id: str
    seller_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int


class CartResponse(BaseModel):
    buyer_id: str
    items: list[CartItemResponse]
    total: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class PlaceOrderRequest(BaseModel):
    items: list[OrderLineRequest] = Field(min_length=1)
    address: AddressSchema
    payment_method: str = "COD"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "address": {
                        "street": "12 Farm Road",
                        "city": "Davao",
                        "state": "Davao del Sur",
                        "zipcode": "8000",
                        "country": "PH",
                        "phone": "+63 912 345 6789",
                    },
                    "payment_method": "COD",
                }
            ]
        }
    }


class CheckoutRequest(BaseModel):
    address: AddressSchema
    payment_method: str = "COD"


class ConfirmOrderRequest(BaseModel):
    note: str | None = None


class RejectOrderRequest(BaseModel):
    reason: str


class ItemDecisionSchema(BaseModel):
    item_id: str
    action: str = Field(pattern="^(confirm|reject)$")


class ProcessOrderItemsRequest(BaseModel):
    decisions: list[ItemDecisionSchema] = Field(min_length=1)
    reason: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class RequestRefundRequest(BaseModel):
    reason: str


class ResolveRefundRequest(BaseModel):
    approve: bool
    note: str | None = None


class OrderItemResponse(BaseModel):
    item_id: str
    product_id: str
    seller_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int
    item_status: str


class OrderResponse(BaseModel):
    order_id: str
    buyer_id: str
    status: str
    amount: float
    payment_method: str
    is_paid: bool
    items: list[OrderItemResponse]
    address: AddressSchema | None = None
    placed_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class CancellationWindowResponse(BaseModel):
    can_cancel: bool
    hours_passed: int
    time_remaining: float


class HistoryEntryResponse(BaseModel):
    type: str
    status: str
    note: str | None = None
    actor_id: str | None = None
    timestamp: str | None = None


class OrderHistoryResponse(BaseModel):
    order_id: str
    history: list[HistoryEntryResponse]


class SellerOrderResponse(BaseModel):
    order_id: str
    buyer_id: str
    order_status: str
    item_count: int
    pending_item_count: int
    seller_amount: float
    placed_at: str | None = None


class SellerOrderListResponse(BaseModel):
    orders: list[SellerOrderResponse]


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------
class InitiateTradeRequest(BaseModel):
    seller_to: str
    product_from_id: str
    product_to_id: str
    quantity_from: int = Field(ge=1)
    quantity_to: int | None = Field(default=None, ge=1)
    message: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "seller_to": "seller-002",
                    "product_from_id": "prod-001",
                    "product_to_id": "prod-009",
                    "quantity_from": 5,
                    "quantity_to": 3,
                    "message": "Five kilos of rice for three of your mangoes?",
                }
            ]
        }
    }


class UpdateTradeRequest(BaseModel):
    quantity_from: int | None = Field(default=None, ge=1)
    quantity_to: int | None = Field(default=None, ge=1)
    message: str | None = None


class TradeReasonRequest(BaseModel):
    reason: str | None = None


class TradeFairnessResponse(BaseModel):
    offered_value: float
    requested_value: float
    value_difference: float
    value_ratio: float


class TradeAuditEntryResponse(BaseModel):
    action: str
    actor_id: str
    product_id: str
    quantity: int
    stock_before: int
    stock_after: int
    recorded_at: str | None = None


class TradeResponse(BaseModel):
    trade_id: str
    seller_from: str
    seller_to: str
    product_from_id: str
    product_to_id: str
    quantity_from: int
    quantity_to: int
    status: str
    message: str | None = None
    fairness: TradeFairnessResponse | None = None
    rejection_reason: str | None = None
    cancellation_reason: str | None = None
    derived_product_for_receiver_id: str | None = None
    derived_product_for_initiator_id: str | None = None
    audit_entries: list[TradeAuditEntryResponse] = []
    created_at: str | None = None


class TradeListResponse(BaseModel):
    trades: list[TradeResponse]


class CompletedTradesResponse(BaseModel):
    given: list[TradeResponse]
    received: list[TradeResponse]
