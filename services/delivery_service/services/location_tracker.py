"""GPS breadcrumbs: append-only history plus the delivery's current position."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import as_utc, utc_now
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from services.delivery_service.models import (
    TRACKABLE_STATUSES,
    Delivery,
    DeliveryLocationHistory,
    DeliveryStatus,
)
from services.delivery_service.realtime.notifier import (
    DeliveryEvent,
    RealtimeNotifier,
    notify,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryTracking:
    """Read-only view of where a delivery is and where it has been."""

    delivery_id: int
    driver_id: Optional[str]
    gps_tracker_id: Optional[str]
    status: DeliveryStatus
    current_latitude: Optional[float]
    current_longitude: Optional[float]
    last_location_update: Optional[datetime]
    from_latitude: Optional[float]
    from_longitude: Optional[float]
    to_latitude: Optional[float]
    to_longitude: Optional[float]
    location_history: tuple[DeliveryLocationHistory, ...] = ()

    @classmethod
    def from_delivery(cls, delivery: Delivery) -> "DeliveryTracking":
        return cls(
            delivery_id=delivery.id,
            driver_id=delivery.driver_id,
            gps_tracker_id=delivery.gps_tracker_id,
            status=delivery.status,
            current_latitude=delivery.current_latitude,
            current_longitude=delivery.current_longitude,
            last_location_update=as_utc(delivery.last_location_update),
            from_latitude=delivery.from_latitude,
            from_longitude=delivery.from_longitude,
            to_latitude=delivery.to_latitude,
            to_longitude=delivery.to_longitude,
            location_history=tuple(delivery.location_history),
        )


async def record_location(
    db: AsyncSession,
    delivery_id: int,
    *,
    latitude: float,
    longitude: float,
    timestamp: Optional[datetime] = None,
    speed: Optional[float] = None,
    notes: Optional[str] = None,
    notifier: Optional[RealtimeNotifier] = None,
) -> DeliveryLocationHistory:
    """Append a sample and move the delivery's snapshot onto it.

    Both writes share one commit, so the snapshot never points at a sample
    that is missing from history (or vice versa).
    """
    delivery = await db.get(Delivery, delivery_id)
    if delivery is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")

    sample = DeliveryLocationHistory(
        delivery_id=delivery_id,
        latitude=latitude,
        longitude=longitude,
        timestamp=as_utc(timestamp) or utc_now(),
        speed=speed,
        notes=notes,
    )
    delivery.location_history.append(sample)

    delivery.current_latitude = sample.latitude
    delivery.current_longitude = sample.longitude
    delivery.last_location_update = sample.timestamp
    delivery.tracking_notes = notes

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Location updated for delivery %s: %s, %s", delivery_id, latitude, longitude
    )

    notify(
        notifier,
        delivery_id,
        DeliveryEvent.LOCATION_UPDATED,
        {
            "latitude": sample.latitude,
            "longitude": sample.longitude,
            "speed": sample.speed,
            "notes": sample.notes,
            "recorded_at": as_utc(sample.timestamp).isoformat(),
        },
    )

    return sample


async def get_location_history(
    db: AsyncSession, delivery_id: int
) -> list[DeliveryLocationHistory]:
    """Samples for a delivery, oldest first."""
    exists = await db.execute(select(Delivery.id).where(Delivery.id == delivery_id))
    if exists.scalar_one_or_none() is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")

    result = await db.execute(
        select(DeliveryLocationHistory)
        .where(DeliveryLocationHistory.delivery_id == delivery_id)
        .order_by(DeliveryLocationHistory.timestamp, DeliveryLocationHistory.id)
    )
    return list(result.scalars().all())


async def get_tracking(db: AsyncSession, delivery_id: int) -> DeliveryTracking:
    result = await db.execute(
        select(Delivery)
        .where(Delivery.id == delivery_id)
        .execution_options(populate_existing=True)
    )
    delivery = result.scalar_one_or_none()
    if delivery is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return DeliveryTracking.from_delivery(delivery)


async def list_active_tracking(db: AsyncSession) -> list[DeliveryTracking]:
    """Tracking views for deliveries on the road (assigned or in transit)."""
    result = await db.execute(
        select(Delivery)
        .where(Delivery.status.in_(list(TRACKABLE_STATUSES)))
        .order_by(Delivery.id)
        .execution_options(populate_existing=True)
    )
    return [DeliveryTracking.from_delivery(d) for d in result.scalars().all()]
