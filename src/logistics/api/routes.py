"""FastAPI routes for the Logistics domain — couriers and shipments."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    AddShippingRateRequest,
    AssignCourierRequest,
    CourierContactResponse,
    CourierListResponse,
    CourierResponse,
    IdResponse,
    LocationUpdateResponse,
    OrderShippingStatusResponse,
    PackageSchema,
    PendingShipmentsResponse,
    ProofOfDeliveryResponse,
    RateQuoteListResponse,
    RateQuoteResponse,
    RegisterCourierRequest,
    ShipmentResponse,
    ShippingRateResponse,
    StatusResponse,
    TrackingNumberResponse,
    TrackingResponse,
    UpdateCourierRequest,
    UpdateShipmentStatusRequest,
)
from logistics.courier.courier import Courier
from logistics.courier.management import AddShippingRate, DeactivateCourier, RegisterCourier, UpdateCourier
from logistics.courier.rates import active_couriers, shipping_rates
from logistics.shipment.assignment import AssignCourier
from logistics.shipment.queries import order_shipping_status, pending_shipments, track
from logistics.shipment.tracking import UpdateShipmentStatus
from shared.access import Actor, Role, current_actor, require_role

_admin = require_role(Role.ADMIN)


def _ts(value):
    return str(value) if value else None


def _courier_response(courier) -> CourierResponse:
    return CourierResponse(
        courier_id=str(courier.id),
        name=courier.name,
        contact_email=courier.contact_email,
        contact_phone=courier.contact_phone,
        website=courier.website,
        service_areas=courier.areas,
        tracking_url_template=courier.tracking_url_template,
        is_active=courier.is_active,
        shipping_rates=[
            ShippingRateResponse(
                from_region=r.from_region,
                to_region=r.to_region,
                base_price=r.base_price,
                price_per_kg=r.price_per_kg or 0.0,
                min_days=r.min_days,
                max_days=r.max_days,
            )
            for r in courier.shipping_rates
        ],
    )


def _shipment_response(shipment) -> ShipmentResponse:
    package = None
    if shipment.package:
        package = PackageSchema(
            weight=shipment.package.weight,
            length=shipment.package.length,
            width=shipment.package.width,
            height=shipment.package.height,
        )
    return ShipmentResponse(
        shipment_id=str(shipment.id),
        order_id=str(shipment.order_id),
        buyer_id=str(shipment.buyer_id),
        status=shipment.status,
        tracking_number=shipment.tracking_number,
        courier_id=str(shipment.courier_id) if shipment.courier_id else None,
        courier_name=shipment.courier_name,
        shipping_method=shipment.shipping_method,
        estimated_delivery=_ts(shipment.estimated_delivery),
        instructions=shipment.instructions,
        needs_refrigeration=bool(shipment.needs_refrigeration),
        insurance_amount=shipment.insurance_amount or 0.0,
        is_contactless=bool(shipment.is_contactless),
        shipping_cost=shipment.shipping_cost or 0.0,
        package=package,
        created_at=_ts(shipment.created_at),
    )


# ---------------------------------------------------------------------------
# Courier Router
# ---------------------------------------------------------------------------
courier_router = APIRouter(prefix="/couriers", tags=["couriers"])


@courier_router.post("", status_code=201, response_model=IdResponse)
async def register_courier(body: RegisterCourierRequest, actor: Actor = Depends(_admin)) -> IdResponse:  # noqa: ARG001
    command = RegisterCourier(
        name=body.name,
        contact_email=body.contact_email,
        contact_phone=body.contact_phone,
        website=body.website,
        service_areas=json.dumps(body.service_areas),
        tracking_url_template=body.tracking_url_template,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@courier_router.get("", response_model=CourierListResponse)
async def list_couriers() -> CourierListResponse:
    return CourierListResponse(couriers=[_courier_response(c) for c in active_couriers()])


@courier_router.get("/rates", response_model=RateQuoteListResponse)
async def quote_shipping_rates(
    from_region: str | None = None, to_region: str | None = None, weight: float | None = None
) -> RateQuoteListResponse:
    return RateQuoteListResponse(rates=[RateQuoteResponse(**q) for q in shipping_rates(from_region, to_region, weight)])


@courier_router.get("/{courier_id}", response_model=CourierResponse)
async def get_courier(courier_id: str) -> CourierResponse:
    return _courier_response(current_domain.repository_for(Courier).get(courier_id))


@courier_router.put("/{courier_id}", response_model=StatusResponse)
async def update_courier(
    courier_id: str, body: UpdateCourierRequest, actor: Actor = Depends(_admin)  # noqa: ARG001
) -> StatusResponse:
    command = UpdateCourier(
        courier_id=courier_id,
        name=body.name,
        contact_email=body.contact_email,
        contact_phone=body.contact_phone,
        website=body.website,
        service_areas=json.dumps(body.service_areas) if body.service_areas is not None else None,
        tracking_url_template=body.tracking_url_template,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@courier_router.delete("/{courier_id}", response_model=StatusResponse)
async def deactivate_courier(courier_id: str, actor: Actor = Depends(_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(DeactivateCourier(courier_id=courier_id), asynchronous=False)
    return StatusResponse()


@courier_router.post("/{courier_id}/rates", status_code=201, response_model=StatusResponse)
async def add_shipping_rate(
    courier_id: str, body: AddShippingRateRequest, actor: Actor = Depends(_admin)  # noqa: ARG001
) -> StatusResponse:
    command = AddShippingRate(
        courier_id=courier_id,
        from_region=body.from_region,
        to_region=body.to_region,
        base_price=body.base_price,
        price_per_kg=body.price_per_kg,
        min_days=body.min_days,
        max_days=body.max_days,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Shipment Router
# ---------------------------------------------------------------------------
shipment_router = APIRouter(prefix="/shipments", tags=["shipments"])


@shipment_router.post("/assign", response_model=TrackingNumberResponse)
async def assign_courier(body: AssignCourierRequest, actor: Actor = Depends(_admin)) -> TrackingNumberResponse:
    command = AssignCourier(
        order_id=body.order_id,
        courier_id=body.courier_id,
        shipping_method=body.shipping_method,
        estimated_delivery=body.estimated_delivery,
        instructions=body.instructions,
        needs_refrigeration=body.needs_refrigeration,
        insurance_amount=body.insurance_amount,
        is_contactless=body.is_contactless,
        package=body.package.model_dump_json() if body.package else None,
        shipping_cost=body.shipping_cost,
        updated_by=actor.user_id,
    )
    tracking_number = current_domain.process(command, asynchronous=False)
    return TrackingNumberResponse(tracking_number=tracking_number)


@shipment_router.get("/pending", response_model=PendingShipmentsResponse)
async def list_pending_shipments(
    page: int = 1, limit: int = 10, actor: Actor = Depends(_admin)  # noqa: ARG001
) -> PendingShipmentsResponse:
    result = pending_shipments(page=page, limit=limit)
    return PendingShipmentsResponse(
        shipments=[_shipment_response(s) for s in result["shipments"]],
        total=result["total"],
        page=result["page"],
        pages=result["pages"],
    )


@shipment_router.get("/orders/{order_id}", response_model=OrderShippingStatusResponse)
async def get_order_shipping_status(
    order_id: str, actor: Actor = Depends(current_actor)  # noqa: ARG001
) -> OrderShippingStatusResponse:
    result = order_shipping_status(order_id)
    shipment = result["shipment"]
    return OrderShippingStatusResponse(
        order_id=result["order_id"],
        status=result["status"],
        tracking_number=shipment.tracking_number if shipment else None,
        courier_name=shipment.courier_name if shipment else None,
    )


@shipment_router.get("/track/{tracking_number}", response_model=TrackingResponse)
async def track_shipment(tracking_number: str, actor: Actor = Depends(current_actor)) -> TrackingResponse:
    result = track(tracking_number, actor.user_id, is_admin=actor.is_admin)
    shipment, courier = result["shipment"], result["courier"]

    proof = None
    if shipment.proof_of_delivery:
        proof = ProofOfDeliveryResponse(
            received_by=shipment.proof_of_delivery.received_by,
            photo_url=shipment.proof_of_delivery.photo_url,
            delivered_at=_ts(shipment.proof_of_delivery.delivered_at),
        )
    return TrackingResponse(
        shipment=_shipment_response(shipment),
        courier=CourierContactResponse(
            name=courier.name,
            contact_email=courier.contact_email,
            contact_phone=courier.contact_phone,
            tracking_url=result["tracking_url"],
        )
        if courier
        else None,
        history=[
            LocationUpdateResponse(
                status=u.status,
                location=u.location,
                notes=u.notes,
                updated_by=str(u.updated_by) if u.updated_by else None,
                timestamp=_ts(u.timestamp),
            )
            for u in result["history"]
        ],
        proof_of_delivery=proof,
    )


@shipment_router.put("/{tracking_number}/status", response_model=StatusResponse)
async def update_shipment_status(
    tracking_number: str, body: UpdateShipmentStatusRequest, actor: Actor = Depends(_admin)
) -> StatusResponse:
    command = UpdateShipmentStatus(
        tracking_number=tracking_number,
        status=body.status,
        location=body.location,
        notes=body.notes,
        received_by=body.received_by,
        photo_url=body.photo_url,
        updated_by=actor.user_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
