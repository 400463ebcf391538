"""Delivery service routers package."""

from services.delivery_service.routers.deliveries import router as deliveries_router
from services.delivery_service.routers.products import router as products_router
from services.delivery_service.routers.realtime import router as realtime_router
from services.delivery_service.routers.stores import router as stores_router
from services.delivery_service.routers.tracking import router as tracking_router
from services.delivery_service.routers.vendors import router as vendors_router

__all__ = [
    "deliveries_router",
    "products_router",
    "realtime_router",
    "stores_router",
    "tracking_router",
    "vendors_router",
]
