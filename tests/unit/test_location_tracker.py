"""Unit tests for GPS breadcrumbs and tracking views."""

from datetime import datetime, timedelta, timezone

import pytest
from libs.common.datetime_utils import as_utc
from libs.common.errors import NotFoundError
from services.delivery_service.models import DeliveryStatus
from services.delivery_service.services.delivery_ledger import (
    create_delivery,
    get_delivery,
    update_status,
)
from services.delivery_service.services.location_tracker import (
    get_location_history,
    get_tracking,
    list_active_tracking,
    record_location,
)
from services.delivery_service.services.store_matcher import LineItemRequest
from tests.conftest import RecordingSocket
from tests.factories import ProductFactory, StoreFactory, VendorFactory, persist


async def _delivery(db):
    vendor = await persist(db, VendorFactory.create(latitude=1.0, longitude=1.0))
    store = await persist(db, StoreFactory.create(latitude=1.2, longitude=1.2))
    product = await persist(db, ProductFactory.create(vendor_id=vendor.id))
    return await create_delivery(
        db,
        vendor_id=vendor.id,
        store_id=store.id,
        line_items=[LineItemRequest(product.id, 1)],
    )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_snapshot_follows_the_latest_sample(db_session):
    delivery = await _delivery(db_session)
    path = [(1.0, 1.0), (1.05, 1.07), (1.12, 1.15)]

    for lat, lon in path:
        await record_location(db_session, delivery.id, latitude=lat, longitude=lon)

    history = await get_location_history(db_session, delivery.id)
    assert [(s.latitude, s.longitude) for s in history] == path

    reloaded = await get_delivery(db_session, delivery.id)
    assert (reloaded.current_latitude, reloaded.current_longitude) == path[-1]
    assert as_utc(reloaded.last_location_update) == as_utc(history[-1].timestamp)
    assert len(reloaded.location_history) == len(path)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sample_keeps_speed_notes_and_given_timestamp(db_session):
    delivery = await _delivery(db_session)
    at = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)

    sample = await record_location(
        db_session,
        delivery.id,
        latitude=1.1,
        longitude=1.1,
        timestamp=at,
        speed=32.5,
        notes="Stuck behind a tractor",
    )

    assert sample.id is not None
    assert sample.speed == 32.5
    reloaded = await get_delivery(db_session, delivery.id)
    assert reloaded.tracking_notes == "Stuck behind a tractor"
    assert as_utc(reloaded.last_location_update) == at


@pytest.mark.asyncio
@pytest.mark.unit
async def test_history_is_time_ordered_but_snapshot_is_last_write(db_session):
    """A late-arriving older sample is filed in time order; the snapshot still moves."""
    delivery = await _delivery(db_session)
    now = datetime.now(timezone.utc)

    await record_location(
        db_session, delivery.id, latitude=1.1, longitude=1.1, timestamp=now
    )
    await record_location(
        db_session,
        delivery.id,
        latitude=1.0,
        longitude=1.0,
        timestamp=now - timedelta(minutes=5),
    )

    history = await get_location_history(db_session, delivery.id)
    assert [s.latitude for s in history] == [1.0, 1.1]

    tracking = await get_tracking(db_session, delivery.id)
    assert tracking.current_latitude == 1.0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_location_for_missing_delivery_raises(db_session):
    with pytest.raises(NotFoundError):
        await record_location(db_session, 404, latitude=0, longitude=0)
    with pytest.raises(NotFoundError):
        await get_location_history(db_session, 404)
    with pytest.raises(NotFoundError):
        await get_tracking(db_session, 404)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_tracking_view_carries_route_and_courier(db_session):
    delivery = await _delivery(db_session)
    await record_location(db_session, delivery.id, latitude=1.1, longitude=1.1)

    tracking = await get_tracking(db_session, delivery.id)

    assert tracking.delivery_id == delivery.id
    assert tracking.status == DeliveryStatus.PENDING_PAYMENT
    assert (tracking.from_latitude, tracking.from_longitude) == (1.0, 1.0)
    assert (tracking.to_latitude, tracking.to_longitude) == (1.2, 1.2)
    assert tracking.last_location_update.tzinfo is not None
    assert len(tracking.location_history) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_active_tracking_lists_assigned_and_in_transit_only(db_session):
    first = await _delivery(db_session)
    vendor_id, store_id = first.vendor_id, first.store_id
    others = [
        await create_delivery(
            db_session, vendor_id=vendor_id, store_id=store_id, line_items=[]
        )
        for _ in range(3)
    ]
    await update_status(db_session, first.id, DeliveryStatus.ASSIGNED)
    await update_status(db_session, others[0].id, DeliveryStatus.IN_TRANSIT)
    await update_status(db_session, others[1].id, DeliveryStatus.DELIVERED)

    views = await list_active_tracking(db_session)

    assert [v.delivery_id for v in views] == [first.id, others[0].id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_location_update_is_published_to_delivery_group(db_session, notifier):
    delivery = await _delivery(db_session)
    watcher, bystander = RecordingSocket(), RecordingSocket()
    notifier.join(notifier.connect(watcher), delivery.id)
    notifier.join(notifier.connect(bystander), delivery.id + 1)

    await record_location(
        db_session, delivery.id, latitude=1.1, longitude=1.2, notifier=notifier
    )
    await notifier.drain()

    assert watcher.events == ["LocationUpdated"]
    data = watcher.messages[0]["data"]
    assert (data["latitude"], data["longitude"]) == (1.1, 1.2)
    assert bystander.messages == []
