"""Courier location updates and tracking views."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.db.session import get_async_db
from services.delivery_service.realtime.notifier import RealtimeNotifier
from services.delivery_service.routers._helpers import get_notifier
from services.delivery_service.schemas import (
    DeliveryTrackingResponse,
    LocationSampleResponse,
    LocationUpdateRequest,
)
from services.delivery_service.services.location_tracker import (
    get_location_history,
    get_tracking,
    list_active_tracking,
    record_location,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/deliveries", tags=["tracking"])


@router.get("/tracking/active", response_model=List[DeliveryTrackingResponse])
async def active_tracking(db: AsyncSession = Depends(get_async_db)):
    """Tracking views for every assigned or in-transit delivery."""
    views = await list_active_tracking(db)
    return [DeliveryTrackingResponse.model_validate(v) for v in views]


@router.post(
    "/{delivery_id}/location",
    response_model=LocationSampleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def update_location(
    delivery_id: int,
    body: LocationUpdateRequest,
    db: AsyncSession = Depends(get_async_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
):
    """Record a GPS sample and move the delivery's current position to it."""
    return await record_location(
        db,
        delivery_id,
        latitude=body.latitude,
        longitude=body.longitude,
        timestamp=body.timestamp,
        speed=body.speed,
        notes=body.notes,
        notifier=notifier,
    )


@router.get("/{delivery_id}/tracking", response_model=DeliveryTrackingResponse)
async def delivery_tracking(
    delivery_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    view = await get_tracking(db, delivery_id)
    return DeliveryTrackingResponse.model_validate(view)


@router.get(
    "/{delivery_id}/location-history", response_model=List[LocationSampleResponse]
)
async def location_history(
    delivery_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await get_location_history(db, delivery_id)
