"""Delivery creation, lookup and status routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.common.config import get_settings
from libs.common.errors import NotFoundError
from libs.db.session import get_async_db
from services.delivery_service.models import Delivery
from services.delivery_service.realtime.notifier import RealtimeNotifier
from services.delivery_service.routers._helpers import (
    get_notifier,
    to_line_items,
    to_summary,
)
from services.delivery_service.schemas import (
    AssignDriverRequest,
    DeliveryCreatedResponse,
    DeliveryRequest,
    DeliveryResponse,
    DeliverySummaryResponse,
    FindBestStoreResponse,
    ManualDeliveryRequest,
    StatusUpdateRequest,
)
from services.delivery_service.services.delivery_ledger import (
    assign_driver,
    create_delivery,
    get_delivery,
    list_active_deliveries,
    request_delivery,
    update_status,
)
from services.delivery_service.services.store_matcher import match_store
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _created(delivery: Delivery) -> DeliveryCreatedResponse:
    return DeliveryCreatedResponse(
        delivery_id=delivery.id,
        store_id=delivery.store.id,
        store_name=delivery.store.name,
        store_address=delivery.store.address,
        total_amount=delivery.total_amount,
        estimated_delivery_time=get_settings().ESTIMATED_DELIVERY_TIME,
    )


@router.post(
    "/request",
    response_model=DeliveryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_delivery_endpoint(
    body: DeliveryRequest,
    db: AsyncSession = Depends(get_async_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
):
    """Create a delivery at the active store nearest to the vendor."""
    delivery = await request_delivery(
        db,
        vendor_id=body.vendor_id,
        line_items=to_line_items(body.products),
        notifier=notifier,
    )
    return _created(delivery)


@router.post(
    "", response_model=DeliveryCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_delivery_endpoint(
    body: ManualDeliveryRequest,
    db: AsyncSession = Depends(get_async_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
):
    """Create a delivery at an explicitly chosen store (manual dispatch)."""
    delivery = await create_delivery(
        db,
        vendor_id=body.vendor_id,
        store_id=body.store_id,
        line_items=to_line_items(body.products),
        notifier=notifier,
    )
    return _created(delivery)


@router.post("/find-best-store", response_model=FindBestStoreResponse)
async def find_best_store(
    body: DeliveryRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Preview which store a request would be routed to, without creating it."""
    match = await match_store(
        db, vendor_id=body.vendor_id, requested_products=to_line_items(body.products)
    )
    return FindBestStoreResponse(
        store_id=match.store.id,
        store_name=match.store.name,
        distance_km=round(match.distance_km, 3),
    )


@router.get("/active", response_model=List[DeliverySummaryResponse])
async def list_active(db: AsyncSession = Depends(get_async_db)):
    """Deliveries that are not yet delivered or cancelled."""
    deliveries = await list_active_deliveries(db)
    return [to_summary(d) for d in deliveries]


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery_endpoint(
    delivery_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await get_delivery(db, delivery_id)


@router.put("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_status_endpoint(
    delivery_id: int,
    body: StatusUpdateRequest,
    db: AsyncSession = Depends(get_async_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
):
    """Move a delivery to a new status (any status is accepted)."""
    if not await update_status(db, delivery_id, body.status, notifier=notifier):
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return await get_delivery(db, delivery_id)


@router.post("/{delivery_id}/assign-driver", response_model=DeliveryResponse)
async def assign_driver_endpoint(
    delivery_id: int,
    body: AssignDriverRequest,
    db: AsyncSession = Depends(get_async_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
):
    assigned = await assign_driver(
        db,
        delivery_id,
        driver_id=body.driver_id,
        gps_tracker_id=body.gps_tracker_id,
        delivery_type=body.delivery_type,
        notifier=notifier,
    )
    if not assigned:
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return await get_delivery(db, delivery_id)
