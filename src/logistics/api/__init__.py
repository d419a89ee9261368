"""Logistics domain API package."""

from logistics.api.routes import courier_router, shipment_router

__all__ = ["courier_router", "shipment_router"]
