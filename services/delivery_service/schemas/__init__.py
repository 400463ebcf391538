"""Delivery Service schemas package.

Re-exports all schemas so routers import from one place.
When adding a new schema, add its import and __all__ entry.
"""

from services.delivery_service.schemas.catalog import (  # noqa: F401
    InventoryAddRequest,
    InventoryItemResponse,
    ProductCreate,
    ProductResponse,
    StoreCreate,
    StoreResponse,
    StoreSummary,
    StoreUpdate,
    VendorCreate,
    VendorResponse,
    VendorSummary,
)
from services.delivery_service.schemas.delivery import (  # noqa: F401
    AssignDriverRequest,
    DeliveryCreatedResponse,
    DeliveryItemResponse,
    DeliveryRequest,
    DeliveryResponse,
    DeliverySummaryResponse,
    DeliveryTrackingResponse,
    FindBestStoreResponse,
    LineItemIn,
    LocationSampleResponse,
    LocationUpdateRequest,
    ManualDeliveryRequest,
    StatusUpdateRequest,
)

__all__ = [
    "AssignDriverRequest",
    "DeliveryCreatedResponse",
    "DeliveryItemResponse",
    "DeliveryRequest",
    "DeliveryResponse",
    "DeliverySummaryResponse",
    "DeliveryTrackingResponse",
    "FindBestStoreResponse",
    "InventoryAddRequest",
    "InventoryItemResponse",
    "LineItemIn",
    "LocationSampleResponse",
    "LocationUpdateRequest",
    "ManualDeliveryRequest",
    "ProductCreate",
    "ProductResponse",
    "StatusUpdateRequest",
    "StoreCreate",
    "StoreResponse",
    "StoreSummary",
    "StoreUpdate",
    "VendorCreate",
    "VendorResponse",
    "VendorSummary",
]
