"""FastAPI routes for the Marketplace domain — products, cart, orders and trades.

Thin adapters: the caller comes from the gateway headers, the body is
translated into a command, and ownership is checked by the handler.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddressSchema,
    AddToCartRequest,
    CancellationWindowResponse,
    CancelOrderRequest,
    CartItemResponse,
    CartResponse,
    CheckoutRequest,
    CompletedTradesResponse,
    ConfirmOrderRequest,
    HistoryEntryResponse,
    IdResponse,
    InitiateTradeRequest,
    ListProductRequest,
    OrderHistoryResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProcessOrderItemsRequest,
    ProductListResponse,
    ProductOriginResponse,
    ProductResponse,
    ProductTradeHistoryResponse,
    RejectOrderRequest,
    RequestRefundRequest,
    ResolveRefundRequest,
    SellerOrderListResponse,
    SellerOrderResponse,
    StatusResponse,
    TradeAuditEntryResponse,
    TradeFairnessResponse,
    TradeHistoryEntryResponse,
    TradeListResponse,
    TradeReasonRequest,
    TradeResponse,
    UpdateCartItemRequest,
    UpdateProductRequest,
    UpdateTradeRequest,
)
from marketplace.cart.items import AddToCart, ClearCart, RefreshCart, RemoveFromCart, UpdateCartItem, load_cart
from marketplace.order.cancellation import CancelOrder, cancellation_window
from marketplace.order.placement import CheckoutCart, PlaceOrder
from marketplace.order.queries import buyer_orders, order_detail, order_history
from marketplace.order.refunds import RequestRefund, ResolveRefund
from marketplace.order.seller_actions import ConfirmOrder, ProcessOrderItems, RejectOrder
from marketplace.product.listing import DelistProduct, ListProduct, UpdateProduct
from marketplace.product.product import Product
from marketplace.product.queries import (
    active_listings,
    product_trade_history,
    received_traded_products,
    seller_products,
    tradeable_products,
)
from marketplace.product.trade_availability import MakeAvailableForTrade, WithdrawFromTrade
from marketplace.projections.seller_orders import seller_orders
from marketplace.trade.completion import CompleteTrade
from marketplace.trade.initiation import InitiateTrade
from marketplace.trade.negotiation import AcceptTrade, CancelTrade, RejectTrade, UpdateTrade
from marketplace.trade.queries import completed_trades, seller_trades, trade_detail
from shared.access import Actor, Role, current_actor, require_role

_seller = require_role(Role.SELLER)
_buyer = require_role(Role.BUYER, Role.SELLER, Role.INVESTOR)


def _ts(value):
    return str(value) if value else None


def _product_response(product) -> ProductResponse:
    origin = None
    if product.origin:
        origin = ProductOriginResponse(
            trade_id=str(product.origin.trade_id),
            original_product_id=str(product.origin.original_product_id),
            original_seller_id=str(product.origin.original_seller_id),
            acquired_at=_ts(product.origin.acquired_at),
        )
    return ProductResponse(
        product_id=str(product.id),
        seller_id=str(product.seller_id),
        name=product.name,
        description=product.description,
        price=product.price,
        images=product.image_urls,
        category=product.category,
        freshness=product.freshness,
        unit_of_measurement=product.unit_of_measurement,
        stock=product.stock,
        is_active=product.is_active,
        available_for_trade=product.available_for_trade,
        origin=origin,
        created_at=_ts(product.created_at),
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        status=order.status,
        amount=order.amount,
        payment_method=order.payment_method,
        is_paid=order.is_paid,
        items=[
            OrderItemResponse(
                item_id=str(i.id),
                product_id=str(i.product_id),
                seller_id=str(i.seller_id),
                name=i.name,
                price=i.price,
                image=i.image,
                quantity=i.quantity,
                item_status=i.item_status,
            )
            for i in order.items
        ],
        address=AddressSchema(**order.address.to_dict()) if order.address else None,
        placed_at=_ts(order.placed_at),
        updated_at=_ts(order.updated_at),
    )


def _trade_response(trade) -> TradeResponse:
    return TradeResponse(
        trade_id=str(trade.id),
        seller_from=str(trade.seller_from),
        seller_to=str(trade.seller_to),
        product_from_id=str(trade.product_from_id),
        product_to_id=str(trade.product_to_id),
        quantity_from=trade.quantity_from,
        quantity_to=trade.quantity_to,
        status=trade.status,
        message=trade.message,
        fairness=TradeFairnessResponse(**trade.fairness.to_dict()) if trade.fairness else None,
        rejection_reason=trade.rejection_reason,
        cancellation_reason=trade.cancellation_reason,
        derived_product_for_receiver_id=_ts(trade.derived_product_for_receiver_id),
        derived_product_for_initiator_id=_ts(trade.derived_product_for_initiator_id),
        audit_entries=[
            TradeAuditEntryResponse(
                action=a.action,
                actor_id=str(a.actor_id),
                product_id=str(a.product_id),
                quantity=a.quantity,
                stock_before=a.stock_before,
                stock_after=a.stock_after,
                recorded_at=_ts(a.recorded_at),
            )
            for a in trade.audit_entries
        ],
        created_at=_ts(trade.created_at),
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=IdResponse)
async def list_product(body: ListProductRequest, actor: Actor = Depends(_seller)) -> IdResponse:
    command = ListProduct(
        seller_id=actor.user_id,
        name=body.name,
        description=body.description,
        price=body.price,
        images=json.dumps(body.images),
        category=body.category,
        unit_of_measurement=body.unit_of_measurement,
        stock=body.stock,
        freshness=body.freshness,
        available_for_trade=body.available_for_trade,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@product_router.get("", response_model=ProductListResponse)
async def browse_products(category: str | None = None, seller_id: str | None = None) -> ProductListResponse:
    """Active listings, optionally narrowed to a category or seller."""
    products = active_listings(category=category, seller_id=seller_id)
    return ProductListResponse(products=[_product_response(p) for p in products])


@product_router.get("/mine", response_model=ProductListResponse)
async def my_products(actor: Actor = Depends(_seller)) -> ProductListResponse:
    return ProductListResponse(products=[_product_response(p) for p in seller_products(actor.user_id)])


@product_router.get("/tradeable", response_model=ProductListResponse)
async def list_tradeable_products(seller_id: str | None = None) -> ProductListResponse:
    return ProductListResponse(products=[_product_response(p) for p in tradeable_products(seller_id)])


@product_router.get("/received", response_model=ProductListResponse)
async def list_received_products(actor: Actor = Depends(_seller)) -> ProductListResponse:
    """Products that came to the caller through completed trades."""
    return ProductListResponse(products=[_product_response(p) for p in received_traded_products(actor.user_id)])


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}/trade-history", response_model=ProductTradeHistoryResponse)
async def get_product_trade_history(
    product_id: str, actor: Actor = Depends(current_actor)
) -> ProductTradeHistoryResponse:
    product, entries = product_trade_history(product_id, actor.user_id)
    return ProductTradeHistoryResponse(
        product_id=str(product.id),
        entries=[
            TradeHistoryEntryResponse(
                trade_id=str(e.trade_id),
                traded_from=str(e.traded_from),
                traded_to=str(e.traded_to),
                new_owner=str(e.new_owner),
                quantity=e.quantity,
                recorded_at=_ts(e.recorded_at),
            )
            for e in entries
        ],
    )


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        seller_id=actor.user_id,
        name=body.name,
        description=body.description,
        price=body.price,
        images=json.dumps(body.images) if body.images is not None else None,
        category=body.category,
        unit_of_measurement=body.unit_of_measurement,
        freshness=body.freshness,
        stock=body.stock,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delist_product(product_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    current_domain.process(DelistProduct(product_id=product_id, seller_id=actor.user_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/trade", response_model=StatusResponse)
async def make_available_for_trade(product_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = MakeAvailableForTrade(product_id=product_id, seller_id=actor.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}/trade", response_model=StatusResponse)
async def withdraw_from_trade(product_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = WithdrawFromTrade(product_id=product_id, seller_id=actor.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(buyer_id) -> CartResponse:
    cart = load_cart(buyer_id, create=True)
    return CartResponse(
        buyer_id=str(buyer_id),
        items=[
            CartItemResponse(
                product_id=str(i.product_id),
                seller_id=str(i.seller_id),
                name=i.name,
                price=i.price,
                image=i.image,
                quantity=i.quantity,
            )
            for i in cart.items
        ],
        total=cart.total,
    )


@cart_router.get("", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(_buyer)) -> CartResponse:
    return _cart_response(actor.user_id)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, actor: Actor = Depends(_buyer)) -> CartResponse:
    command = AddToCart(buyer_id=actor.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(actor.user_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, actor: Actor = Depends(_buyer)
) -> CartResponse:
    command = UpdateCartItem(buyer_id=actor.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(actor.user_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, actor: Actor = Depends(_buyer)) -> CartResponse:
    current_domain.process(RemoveFromCart(buyer_id=actor.user_id, product_id=product_id), asynchronous=False)
    return _cart_response(actor.user_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(actor: Actor = Depends(_buyer)) -> CartResponse:
    current_domain.process(ClearCart(buyer_id=actor.user_id), asynchronous=False)
    return _cart_response(actor.user_id)


@cart_router.post("/refresh", response_model=CartResponse)
async def refresh_cart(actor: Actor = Depends(_buyer)) -> CartResponse:
    current_domain.process(RefreshCart(buyer_id=actor.user_id), asynchronous=False)
    return _cart_response(actor.user_id)


@cart_router.post("/checkout", status_code=201, response_model=IdResponse)
async def checkout_cart(body: CheckoutRequest, actor: Actor = Depends(_buyer)) -> IdResponse:
    command = CheckoutCart(
        buyer_id=actor.user_id,
        address=json.dumps(body.address.model_dump()),
        payment_method=body.payment_method,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=IdResponse)
async def place_order(body: PlaceOrderRequest, actor: Actor = Depends(_buyer)) -> IdResponse:
    command = PlaceOrder(
        buyer_id=actor.user_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        address=json.dumps(body.address.model_dump()),
        payment_method=body.payment_method,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(status: str | None = None, actor: Actor = Depends(current_actor)) -> OrderListResponse:
    return OrderListResponse(orders=[_order_response(o) for o in buyer_orders(actor.user_id, status=status)])


@order_router.get("/seller", response_model=SellerOrderListResponse)
async def list_seller_orders(status: str | None = None, actor: Actor = Depends(_seller)) -> SellerOrderListResponse:
    """The seller's share of each order, e.g. ``?status=Pending Confirmation`` for the inbox."""
    return SellerOrderListResponse(
        orders=[
            SellerOrderResponse(
                order_id=str(r.order_id),
                buyer_id=str(r.buyer_id),
                order_status=r.order_status,
                item_count=r.item_count,
                pending_item_count=r.pending_item_count,
                seller_amount=r.seller_amount,
                placed_at=_ts(r.placed_at),
            )
            for r in seller_orders(actor.user_id, status=status)
        ]
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    return _order_response(order_detail(order_id, actor.user_id, is_admin=actor.is_admin))


@order_router.get("/{order_id}/history", response_model=OrderHistoryResponse)
async def get_order_history(order_id: str, actor: Actor = Depends(current_actor)) -> OrderHistoryResponse:
    entries = order_history(order_id, actor.user_id, is_admin=actor.is_admin)
    return OrderHistoryResponse(
        order_id=order_id,
        history=[
            HistoryEntryResponse(
                type=e["type"],
                status=e["status"],
                note=e["note"],
                actor_id=e["actor_id"],
                timestamp=_ts(e["timestamp"]),
            )
            for e in entries
        ],
    )


@order_router.get("/{order_id}/cancellation-window", response_model=CancellationWindowResponse)
async def get_cancellation_window(order_id: str, actor: Actor = Depends(current_actor)) -> CancellationWindowResponse:
    return CancellationWindowResponse(**cancellation_window(order_id, actor.user_id))


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    command = CancelOrder(order_id=order_id, buyer_id=actor.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/confirm", response_model=StatusResponse)
async def confirm_order(
    order_id: str, body: ConfirmOrderRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = ConfirmOrder(order_id=order_id, seller_id=actor.user_id, note=body.note if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/reject", response_model=StatusResponse)
async def reject_order(order_id: str, body: RejectOrderRequest, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = RejectOrder(order_id=order_id, seller_id=actor.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/items", response_model=StatusResponse)
async def process_order_items(
    order_id: str, body: ProcessOrderItemsRequest, actor: Actor = Depends(_seller)
) -> StatusResponse:
    """Confirm or reject individual items of the caller's share of an order."""
    command = ProcessOrderItems(
        order_id=order_id,
        seller_id=actor.user_id,
        decisions=json.dumps([d.model_dump() for d in body.decisions]),
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/refund", status_code=201, response_model=StatusResponse)
async def request_refund(
    order_id: str, body: RequestRefundRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    command = RequestRefund(order_id=order_id, buyer_id=actor.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/refund", response_model=StatusResponse)
async def resolve_refund(
    order_id: str, body: ResolveRefundRequest, actor: Actor = Depends(require_role(Role.SELLER, Role.ADMIN))
) -> StatusResponse:
    command = ResolveRefund(
        order_id=order_id,
        resolved_by=actor.user_id,
        approve=body.approve,
        note=body.note,
        is_admin=actor.is_admin,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Trade Router
# ---------------------------------------------------------------------------
trade_router = APIRouter(prefix="/trades", tags=["trades"])


@trade_router.post("", status_code=201, response_model=IdResponse)
async def initiate_trade(body: InitiateTradeRequest, actor: Actor = Depends(_seller)) -> IdResponse:
    command = InitiateTrade(
        seller_from=actor.user_id,
        seller_to=body.seller_to,
        product_from_id=body.product_from_id,
        product_to_id=body.product_to_id,
        quantity_from=body.quantity_from,
        quantity_to=body.quantity_to,
        message=body.message,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@trade_router.get("", response_model=TradeListResponse)
async def list_trades(
    direction: str | None = None, status: str | None = None, actor: Actor = Depends(_seller)
) -> TradeListResponse:
    """Trades the caller sent (``direction=sent``), received (``received``), or both."""
    trades = seller_trades(actor.user_id, direction=direction, status=status)
    return TradeListResponse(trades=[_trade_response(t) for t in trades])


@trade_router.get("/completed", response_model=CompletedTradesResponse)
async def list_completed_trades(actor: Actor = Depends(_seller)) -> CompletedTradesResponse:
    split = completed_trades(actor.user_id)
    return CompletedTradesResponse(
        given=[_trade_response(t) for t in split["given"]],
        received=[_trade_response(t) for t in split["received"]],
    )


@trade_router.get("/{trade_id}", response_model=TradeResponse)
async def get_trade(trade_id: str, actor: Actor = Depends(current_actor)) -> TradeResponse:
    return _trade_response(trade_detail(trade_id, actor.user_id))


@trade_router.put("/{trade_id}", response_model=StatusResponse)
async def update_trade(trade_id: str, body: UpdateTradeRequest, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = UpdateTrade(
        trade_id=trade_id,
        seller_from=actor.user_id,
        quantity_from=body.quantity_from,
        quantity_to=body.quantity_to,
        message=body.message,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@trade_router.put("/{trade_id}/accept", response_model=StatusResponse)
async def accept_trade(trade_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    current_domain.process(AcceptTrade(trade_id=trade_id, seller_to=actor.user_id), asynchronous=False)
    return StatusResponse()


@trade_router.put("/{trade_id}/reject", response_model=StatusResponse)
async def reject_trade(
    trade_id: str, body: TradeReasonRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = RejectTrade(trade_id=trade_id, seller_to=actor.user_id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@trade_router.put("/{trade_id}/cancel", response_model=StatusResponse)
async def cancel_trade(
    trade_id: str, body: TradeReasonRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = CancelTrade(trade_id=trade_id, seller_from=actor.user_id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@trade_router.put("/{trade_id}/complete", response_model=StatusResponse)
async def complete_trade(trade_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    current_domain.process(CompleteTrade(trade_id=trade_id, actor_id=actor.user_id), asynchronous=False)
    return StatusResponse()
