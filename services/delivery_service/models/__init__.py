"""Delivery Service models package.

Re-exports every model and enum so SQLAlchemy's mapper registry (and Alembic)
sees all tables on a single import.
"""

from services.delivery_service.models.catalog import (  # noqa: F401
    Product,
    Store,
    StoreProduct,
    Vendor,
)
from services.delivery_service.models.delivery import (  # noqa: F401
    Delivery,
    DeliveryLocationHistory,
    DeliveryProduct,
)
from services.delivery_service.models.enums import (  # noqa: F401
    TERMINAL_STATUSES,
    TRACKABLE_STATUSES,
    DeliveryStatus,
    DeliveryType,
)

__all__ = [
    # Enums
    "DeliveryStatus",
    "DeliveryType",
    "TERMINAL_STATUSES",
    "TRACKABLE_STATUSES",
    # Catalog
    "Product",
    "Store",
    "StoreProduct",
    "Vendor",
    # Delivery
    "Delivery",
    "DeliveryLocationHistory",
    "DeliveryProduct",
]
