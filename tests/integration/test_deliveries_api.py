"""Integration tests for delivery endpoints."""

from decimal import Decimal

import pytest
from tests.conftest import RecordingSocket
from tests.factories import ProductFactory, StoreFactory, VendorFactory, persist


async def _seed(db):
    """Vendor at (0,0); active stores at 0.5 and 2 degrees east; an inactive one closer."""
    vendor = await persist(db, VendorFactory.create(latitude=0, longitude=0))
    _, near, far = await persist(
        db,
        StoreFactory.create(name="Closed Depot", latitude=0, longitude=0.1, is_active=False),
        StoreFactory.create(name="Near Depot", address="5 Near St", latitude=0, longitude=0.5),
        StoreFactory.create(name="Far Depot", latitude=0, longitude=2.0),
    )
    ten, five = await persist(
        db,
        ProductFactory.create(vendor_id=vendor.id, price=Decimal("10.00")),
        ProductFactory.create(vendor_id=vendor.id, price=Decimal("5.00")),
    )
    return {"vendor": vendor, "near": near, "far": far, "ten": ten, "five": five}


def _order(seed, **extra):
    body = {
        "vendor_id": seed["vendor"].id,
        "products": [
            {"product_id": seed["ten"].id, "quantity": 2},
            {"product_id": seed["five"].id, "quantity": 1},
        ],
    }
    body.update(extra)
    return body


async def _create(client, seed) -> int:
    response = await client.post("/deliveries/request", json=_order(seed))
    assert response.status_code == 201, response.text
    return response.json()["delivery_id"]


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "delivery"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_is_echoed(client):
    response = await client.get("/deliveries/active", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_delivery_routes_to_nearest_active_store(client, db_session):
    """POST /deliveries/request: nearest active store, frozen total, ETA string."""
    seed = await _seed(db_session)

    response = await client.post("/deliveries/request", json=_order(seed))

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["store_id"] == seed["near"].id
    assert data["store_name"] == "Near Depot"
    assert data["store_address"] == "5 Near St"
    assert Decimal(data["total_amount"]) == Decimal("25.00")
    assert data["estimated_delivery_time"] == "2-3 hours"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_delivery_unknown_vendor_is_404(client, db_session):
    await _seed(db_session)

    response = await client.post(
        "/deliveries/request", json={"vendor_id": 999, "products": []}
    )

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_delivery_without_active_store_is_409(client, db_session):
    vendor = await persist(db_session, VendorFactory.create())
    await persist(db_session, StoreFactory.create(is_active=False))

    response = await client.post(
        "/deliveries/request", json={"vendor_id": vendor.id, "products": []}
    )

    assert response.status_code == 409
    assert response.json() == {
        "detail": "No active stores available",
        "kind": "unavailable",
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_delivery_rejects_non_positive_quantity(client, db_session):
    seed = await _seed(db_session)
    body = {
        "vendor_id": seed["vendor"].id,
        "products": [{"product_id": seed["ten"].id, "quantity": 0}],
    }

    response = await client.post("/deliveries/request", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_manual_delivery_uses_chosen_store(client, db_session):
    seed = await _seed(db_session)

    response = await client.post(
        "/deliveries", json=_order(seed, store_id=seed["far"].id)
    )

    assert response.status_code == 201, response.text
    assert response.json()["store_id"] == seed["far"].id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_find_best_store_preview(client, db_session):
    seed = await _seed(db_session)

    response = await client.post("/deliveries/find-best-store", json=_order(seed))

    assert response.status_code == 200
    data = response.json()
    assert data["store_id"] == seed["near"].id
    assert data["distance_km"] == pytest.approx(55.6, abs=0.1)
    active = await client.get("/deliveries/active")
    assert active.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_creation_is_broadcast(client, db_session, notifier):
    seed = await _seed(db_session)
    socket = RecordingSocket()
    notifier.join_all(notifier.connect(socket))

    delivery_id = await _create(client, seed)
    await notifier.drain()

    assert socket.events == ["DeliveryCreated"]
    assert socket.messages[0]["delivery_id"] == delivery_id


# ---------------------------------------------------------------------------
# Reads and status
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_delivery_detail(client, db_session):
    seed = await _seed(db_session)
    delivery_id = await _create(client, seed)

    response = await client.get(f"/deliveries/{delivery_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pending_payment"
    assert data["vendor"]["id"] == seed["vendor"].id
    assert data["store"]["name"] == "Near Depot"
    assert [(i["product_id"], i["quantity"]) for i in data["items"]] == [
        (seed["ten"].id, 2),
        (seed["five"].id, 1),
    ]
    assert Decimal(data["items"][0]["line_total"]) == Decimal("20.00")
    assert data["location_history"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_missing_delivery_is_404(client):
    response = await client.get("/deliveries/12345")

    assert response.status_code == 404
    assert response.json() == {"detail": "Delivery 12345 not found", "kind": "not_found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_status_update_and_active_list(client, db_session):
    seed = await _seed(db_session)
    first = await _create(client, seed)
    second = await _create(client, seed)

    response = await client.put(f"/deliveries/{first}/status", json={"status": "delivered"})

    assert response.status_code == 200
    assert response.json()["status"] == "delivered"
    assert response.json()["delivered_at"] is not None

    active = await client.get("/deliveries/active")
    assert [d["id"] for d in active.json()] == [second]
    assert active.json()[0]["store_name"] == "Near Depot"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_status_update_validation_and_missing(client, db_session):
    seed = await _seed(db_session)
    delivery_id = await _create(client, seed)

    bad = await client.put(f"/deliveries/{delivery_id}/status", json={"status": "lost"})
    missing = await client.put("/deliveries/999/status", json={"status": "paid"})

    assert bad.status_code == 422
    assert bad.json()["kind"] == "invalid_argument"
    assert missing.status_code == 404


# ---------------------------------------------------------------------------
# Courier and tracking
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_assign_location_and_track(client, db_session, notifier):
    seed = await _seed(db_session)
    delivery_id = await _create(client, seed)
    socket = RecordingSocket()
    notifier.join(notifier.connect(socket), delivery_id)

    assigned = await client.post(
        f"/deliveries/{delivery_id}/assign-driver",
        json={"driver_id": "drv-1", "gps_tracker_id": "gps-1", "delivery_type": "express"},
    )
    assert assigned.status_code == 200, assigned.text
    assert assigned.json()["status"] == "assigned"
    assert assigned.json()["type"] == "express"
    assert assigned.json()["assigned_at"] is not None

    for lat, lon in [(0.0, 0.1), (0.0, 0.3)]:
        response = await client.post(
            f"/deliveries/{delivery_id}/location",
            json={"latitude": lat, "longitude": lon, "speed": 40.0},
        )
        assert response.status_code == 201, response.text

    tracking = await client.get(f"/deliveries/{delivery_id}/tracking")
    assert tracking.status_code == 200
    data = tracking.json()
    assert data["driver_id"] == "drv-1"
    assert (data["current_latitude"], data["current_longitude"]) == (0.0, 0.3)
    assert (data["to_latitude"], data["to_longitude"]) == (0.0, 0.5)
    assert [s["longitude"] for s in data["location_history"]] == [0.1, 0.3]

    active = await client.get("/deliveries/tracking/active")
    assert [t["delivery_id"] for t in active.json()] == [delivery_id]

    history = await client.get(f"/deliveries/{delivery_id}/location-history")
    assert len(history.json()) == 2

    await notifier.drain()
    assert socket.events == ["StatusUpdated", "LocationUpdated", "LocationUpdated"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_for_missing_delivery_is_404(client):
    response = await client.post(
        "/deliveries/999/location", json={"latitude": 1.0, "longitude": 1.0}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_location_rejects_out_of_range_latitude(client, db_session):
    seed = await _seed(db_session)
    delivery_id = await _create(client, seed)

    response = await client.post(
        f"/deliveries/{delivery_id}/location", json={"latitude": 91.0, "longitude": 0.0}
    )

    assert response.status_code == 422
