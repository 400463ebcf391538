"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    vendor = VendorFactory.create(latitude=1.5)
    db_session.add(vendor)
    await db_session.commit()
"""

import uuid
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _suffix() -> str:
    return uuid.uuid4().hex[:8]


async def persist(db, *instances):
    """Add and commit instances, returning them refreshed (ids populated)."""
    db.add_all(instances)
    await db.commit()
    for instance in instances:
        await db.refresh(instance)
    return instances if len(instances) > 1 else instances[0]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class VendorFactory:
    @staticmethod
    def create(**overrides):
        from services.delivery_service.models import Vendor

        defaults = {
            "name": f"Vendor {_suffix()}",
            "contact_email": f"vendor-{_suffix()}@test.com",
            "address": "1 Market Street",
            "latitude": 0.0,
            "longitude": 0.0,
        }
        defaults.update(overrides)
        return Vendor(**defaults)


class StoreFactory:
    @staticmethod
    def create(**overrides):
        from services.delivery_service.models import Store

        defaults = {
            "name": f"Store {_suffix()}",
            "address": "99 Depot Road",
            "latitude": 0.0,
            "longitude": 0.5,
            "is_active": True,
        }
        defaults.update(overrides)
        return Store(**defaults)


class ProductFactory:
    @staticmethod
    def create(vendor_id, **overrides):
        from services.delivery_service.models import Product

        defaults = {
            "vendor_id": vendor_id,
            "name": f"Product {_suffix()}",
            "price": Decimal("10.00"),
            "weight": Decimal("1.00"),
            "category": "general",
        }
        defaults.update(overrides)
        return Product(**defaults)
