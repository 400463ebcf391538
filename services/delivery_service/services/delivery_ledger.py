"""Delivery ledger: creation with frozen totals, lookups and the status machine.

The ledger is the only writer of delivery headers and line items. Location
fields belong to ``location_tracker``.

Status transitions are deliberately permissive: any status may be written
over any other so that payment and dispatch can apply out-of-order
corrections. Only the one-shot timestamps are guarded.
"""

from decimal import Decimal
from typing import Optional, Sequence

from libs.common.datetime_utils import utc_now
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from services.delivery_service.models import (
    TERMINAL_STATUSES,
    Delivery,
    DeliveryProduct,
    DeliveryStatus,
    DeliveryType,
)
from services.delivery_service.realtime.notifier import (
    DeliveryEvent,
    RealtimeNotifier,
    notify,
)
from services.delivery_service.services.catalog_ops import (
    get_store,
    get_unit_prices,
    get_vendor,
)
from services.delivery_service.services.store_matcher import LineItemRequest, select_store
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CENT = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(CENT))


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_delivery(
    db: AsyncSession,
    *,
    vendor_id: int,
    store_id: int,
    line_items: Sequence[LineItemRequest],
    notifier: Optional[RealtimeNotifier] = None,
) -> Delivery:
    """Persist a delivery and its line items as one unit of work.

    Each line is priced from the catalog now and the total is frozen.
    Lines naming an unknown product add nothing and are not stored.

    Raises:
        NotFoundError: vendor or store does not exist.
    """
    vendor = await get_vendor(db, vendor_id)
    store = await get_store(db, store_id)
    prices = await get_unit_prices(db, (item.product_id for item in line_items))

    total = Decimal("0.00")
    items: list[DeliveryProduct] = []
    for item in line_items:
        unit_price = prices.get(item.product_id)
        if unit_price is None:
            logger.warning(
                "Skipping unknown product %s in delivery for vendor %s",
                item.product_id,
                vendor_id,
            )
            continue
        total += unit_price * item.quantity
        items.append(
            DeliveryProduct(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=unit_price,
            )
        )

    delivery = Delivery(
        vendor_id=vendor.id,
        store_id=store.id,
        total_amount=total.quantize(CENT),
        status=DeliveryStatus.PENDING_PAYMENT,
        created_at=utc_now(),
        from_latitude=vendor.latitude,
        from_longitude=vendor.longitude,
        to_latitude=store.latitude,
        to_longitude=store.longitude,
        items=items,
    )
    db.add(delivery)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Created delivery %s for vendor %s at store %s (%d line items, total=%s)",
        delivery.id,
        vendor_id,
        store_id,
        len(items),
        _money(total),
    )

    delivery = await get_delivery(db, delivery.id)
    notify(
        notifier,
        delivery.id,
        DeliveryEvent.CREATED,
        {
            "vendor_id": delivery.vendor_id,
            "store_id": delivery.store_id,
            "store_name": store.name,
            "status": delivery.status.value,
            "total_amount": _money(delivery.total_amount),
        },
    )
    return delivery


async def request_delivery(
    db: AsyncSession,
    *,
    vendor_id: int,
    line_items: Sequence[LineItemRequest],
    notifier: Optional[RealtimeNotifier] = None,
) -> Delivery:
    """Match the nearest active store, then create the delivery there."""
    store = await select_store(db, vendor_id=vendor_id, requested_products=line_items)
    return await create_delivery(
        db,
        vendor_id=vendor_id,
        store_id=store.id,
        line_items=line_items,
        notifier=notifier,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def find_delivery(db: AsyncSession, delivery_id: int) -> Optional[Delivery]:
    """Full delivery (vendor, store, items with products, history) or None."""
    result = await db.execute(
        select(Delivery)
        .where(Delivery.id == delivery_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_delivery(db: AsyncSession, delivery_id: int) -> Delivery:
    """Like ``find_delivery`` but raises NotFoundError when absent."""
    delivery = await find_delivery(db, delivery_id)
    if delivery is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return delivery


async def list_active_deliveries(db: AsyncSession) -> list[Delivery]:
    """Deliveries that are neither delivered nor cancelled, in id order."""
    result = await db.execute(
        select(Delivery)
        .where(Delivery.status.not_in(list(TERMINAL_STATUSES)))
        .order_by(Delivery.id)
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Status machine
# ---------------------------------------------------------------------------


def apply_status(delivery: Delivery, status: DeliveryStatus) -> None:
    """Set ``status`` and stamp the one-shot timestamps.

    assigned_at and delivered_at are written only the first time the
    delivery enters that status; later entries leave them untouched.
    """
    now = utc_now()
    delivery.status = status
    if status == DeliveryStatus.ASSIGNED and delivery.assigned_at is None:
        delivery.assigned_at = now
    if status == DeliveryStatus.DELIVERED and delivery.delivered_at is None:
        delivery.delivered_at = now


async def update_status(
    db: AsyncSession,
    delivery_id: int,
    status: DeliveryStatus | str,
    *,
    notifier: Optional[RealtimeNotifier] = None,
) -> bool:
    """Write a new status. Returns False when the delivery does not exist.

    No predecessor check is made: e.g. delivered -> pending_payment is accepted.
    """
    status = DeliveryStatus(status)
    delivery = await db.get(Delivery, delivery_id)
    if delivery is None:
        return False

    previous = delivery.status
    apply_status(delivery, status)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Delivery %s status %s -> %s", delivery_id, previous.value, status.value
    )
    notify(
        notifier,
        delivery_id,
        DeliveryEvent.STATUS_UPDATED,
        {"status": status.value, "previous_status": previous.value},
    )
    return True


async def assign_driver(
    db: AsyncSession,
    delivery_id: int,
    *,
    driver_id: str,
    gps_tracker_id: str,
    delivery_type: DeliveryType = DeliveryType.STANDARD,
    notifier: Optional[RealtimeNotifier] = None,
) -> bool:
    """Attach a courier and GPS tracker, then move the delivery to assigned."""
    delivery = await db.get(Delivery, delivery_id)
    if delivery is None:
        return False

    previous = delivery.status
    delivery.driver_id = driver_id
    delivery.gps_tracker_id = gps_tracker_id
    delivery.type = delivery_type
    apply_status(delivery, DeliveryStatus.ASSIGNED)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Driver %s assigned to delivery %s with GPS tracker %s",
        driver_id,
        delivery_id,
        gps_tracker_id,
    )
    notify(
        notifier,
        delivery_id,
        DeliveryEvent.STATUS_UPDATED,
        {
            "status": DeliveryStatus.ASSIGNED.value,
            "previous_status": previous.value,
            "driver_id": driver_id,
            "gps_tracker_id": gps_tracker_id,
        },
    )
    return True
