"""Nearest-store selection for a vendor's delivery request."""

from dataclasses import dataclass
from typing import Optional, Sequence

from libs.common.errors import UnavailableError
from libs.common.logging import get_logger
from services.delivery_service.models import Store, Vendor
from services.delivery_service.services.catalog_ops import get_vendor, list_stores
from services.delivery_service.services.geo import haversine_km
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class LineItemRequest:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class StoreMatch:
    store: Store
    distance_km: float


def nearest_store(vendor: Vendor, stores: Sequence[Store]) -> Optional[StoreMatch]:
    """Pick the store closest to the vendor.

    ``stores`` must already be in identity order; on an exact distance tie the
    first one seen wins.
    """
    best: Optional[StoreMatch] = None
    for store in stores:
        distance = haversine_km(
            vendor.latitude, vendor.longitude, store.latitude, store.longitude
        )
        if best is None or distance < best.distance_km:
            best = StoreMatch(store=store, distance_km=distance)
    return best


async def match_store(
    db: AsyncSession,
    *,
    vendor_id: int,
    requested_products: Sequence[LineItemRequest] = (),
) -> StoreMatch:
    """Choose the nearest active store for a vendor.

    ``requested_products`` is part of the contract for inventory-aware
    matching, but the current policy ignores stock and capacity.

    Raises:
        NotFoundError: the vendor does not exist.
        UnavailableError: no store is active.
    """
    vendor = await get_vendor(db, vendor_id)
    active_stores = await list_stores(db, active_only=True)

    match = nearest_store(vendor, active_stores)
    if match is None:
        raise UnavailableError("No active stores available")

    logger.info(
        "Matched vendor %s to store %s (%.2f km, %d active stores, %d line items)",
        vendor_id,
        match.store.id,
        match.distance_km,
        len(active_stores),
        len(requested_products),
    )
    return match


async def select_store(
    db: AsyncSession,
    *,
    vendor_id: int,
    requested_products: Sequence[LineItemRequest] = (),
) -> Store:
    match = await match_store(
        db, vendor_id=vendor_id, requested_products=requested_products
    )
    return match.store
