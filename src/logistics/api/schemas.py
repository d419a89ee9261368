"""Pydantic request/response schemas for the Logistics API."""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Couriers
# ---------------------------------------------------------------------------
class RegisterCourierRequest(BaseModel):
    name: str
    contact_email: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    service_areas: list[str] = []
    tracking_url_template: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Highland Express",
                    "contact_email": "dispatch@highland.example",
                    "contact_phone": "+254700000000",
                    "service_areas": ["Nairobi", "Nakuru"],
                    "tracking_url_template": "https://highland.example/track/{tracking_number}",
                }
            ]
        }
    }


class UpdateCourierRequest(BaseModel):
    name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    service_areas: list[str] | None = None
    tracking_url_template: str | None = None


class AddShippingRateRequest(BaseModel):
    from_region: str
    to_region: str
    base_price: float = Field(ge=0)
    price_per_kg: float = Field(default=0.0, ge=0)
    min_days: int | None = Field(default=None, ge=0)
    max_days: int | None = Field(default=None, ge=0)


class ShippingRateResponse(BaseModel):
    from_region: str
    to_region: str
    base_price: float
    price_per_kg: float
    min_days: int | None = None
    max_days: int | None = None


class CourierResponse(BaseModel):
    courier_id: str
    name: str
    contact_email: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    service_areas: list[str] = []
    tracking_url_template: str | None = None
    is_active: bool
    shipping_rates: list[ShippingRateResponse] = []


class CourierListResponse(BaseModel):
    couriers: list[CourierResponse]


class RateQuoteResponse(BaseModel):
    courier_id: str
    courier_name: str
    base_price: float
    price_per_kg: float
    estimated_cost: float
    min_days: int | None = None
    max_days: int | None = None


class RateQuoteListResponse(BaseModel):
    rates: list[RateQuoteResponse]


# ---------------------------------------------------------------------------
# Shipments
# ---------------------------------------------------------------------------
class PackageSchema(BaseModel):
    weight: float | None = Field(default=None, ge=0)
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)


class AssignCourierRequest(BaseModel):
    order_id: str
    courier_id: str
    shipping_method: str | None = None
    estimated_delivery: datetime | None = None
    instructions: str | None = None
    needs_refrigeration: bool = False
    insurance_amount: float = Field(default=0.0, ge=0)
    is_contactless: bool = False
    package: PackageSchema | None = None
    shipping_cost: float | None = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "ord-001",
                    "courier_id": "cour-001",
                    "shipping_method": "Express",
                    "needs_refrigeration": True,
                    "package": {"weight": 12.5},
                }
            ]
        }
    }


class TrackingNumberResponse(BaseModel):
    tracking_number: str


class UpdateShipmentStatusRequest(BaseModel):
    status: str
    location: str | None = None
    notes: str | None = None
    received_by: str | None = None
    photo_url: str | None = None


class LocationUpdateResponse(BaseModel):
    status: str
    location: str | None = None
    notes: str | None = None
    updated_by: str | None = None
    timestamp: str | None = None


class ProofOfDeliveryResponse(BaseModel):
    received_by: str | None = None
    photo_url: str | None = None
    delivered_at: str | None = None


class CourierContactResponse(BaseModel):
    name: str
    contact_email: str | None = None
    contact_phone: str | None = None
    tracking_url: str | None = None


class ShipmentResponse(BaseModel):
    shipment_id: str
    order_id: str
    buyer_id: str
    status: str
    tracking_number: str | None = None
    courier_id: str | None = None
    courier_name: str | None = None
    shipping_method: str | None = None
    estimated_delivery: str | None = None
    instructions: str | None = None
    needs_refrigeration: bool = False
    insurance_amount: float = 0.0
    is_contactless: bool = False
    shipping_cost: float = 0.0
    package: PackageSchema | None = None
    created_at: str | None = None


class TrackingResponse(BaseModel):
    shipment: ShipmentResponse
    courier: CourierContactResponse | None = None
    history: list[LocationUpdateResponse]
    proof_of_delivery: ProofOfDeliveryResponse | None = None


class OrderShippingStatusResponse(BaseModel):
    order_id: str
    status: str
    tracking_number: str | None = None
    courier_name: str | None = None


class PendingShipmentsResponse(BaseModel):
    shipments: list[ShipmentResponse]
    total: int
    page: int
    pages: int
