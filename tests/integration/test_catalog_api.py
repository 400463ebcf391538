"""Integration tests for vendor, store, product and inventory endpoints."""

import pytest


async def _vendor(client, name="Acme Foods"):
    response = await client.post(
        "/vendors",
        json={
            "name": name,
            "contact_email": "ops@acme-foods.example.com",
            "address": "1 Market Street",
            "latitude": 6.5,
            "longitude": 3.4,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _store(client, name="Depot One", **overrides):
    body = {"name": name, "address": "99 Depot Road", "latitude": 6.6, "longitude": 3.5}
    body.update(overrides)
    response = await client.post("/stores", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_vendor_lifecycle(client):
    vendor = await _vendor(client)

    listed = await client.get("/vendors")
    fetched = await client.get(f"/vendors/{vendor['id']}")
    duplicate = await client.post(
        "/vendors",
        json={
            "name": "Acme Foods",
            "contact_email": "orders@acme-foods.example.com",
            "latitude": 0,
            "longitude": 0,
        },
    )

    assert [v["id"] for v in listed.json()] == [vendor["id"]]
    assert fetched.json()["contact_email"] == "ops@acme-foods.example.com"
    assert duplicate.status_code == 422
    assert duplicate.json()["kind"] == "invalid_argument"
    assert "Acme Foods" in duplicate.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_vendor_requires_valid_email(client):
    response = await client.post(
        "/vendors",
        json={"name": "NoMail", "contact_email": "not-an-email", "latitude": 0, "longitude": 0},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_vendor_is_404(client):
    response = await client.get("/vendors/77")
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_store_patch_and_active_filter(client):
    store = await _store(client)
    await _store(client, name="Depot Two")

    patched = await client.patch(f"/stores/{store['id']}", json={"is_active": False})
    active = await client.get("/stores", params={"active_only": True})

    assert patched.status_code == 200
    assert patched.json()["is_active"] is False
    assert patched.json()["name"] == "Depot One"
    assert [s["name"] for s in active.json()] == ["Depot Two"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_products_and_inventory(client):
    vendor = await _vendor(client)
    store = await _store(client)

    product = await client.post(
        "/products",
        json={"vendor_id": vendor["id"], "name": "Rice 5kg", "price": "12.50", "category": "grocery"},
    )
    assert product.status_code == 201, product.text
    product_id = product.json()["id"]

    orphan = await client.post(
        "/products", json={"vendor_id": 999, "name": "Ghost", "price": "1.00"}
    )
    assert orphan.status_code == 422

    for quantity in (4, 6):
        added = await client.post(
            f"/stores/{store['id']}/inventory",
            json={"product_id": product_id, "quantity": quantity},
        )
        assert added.status_code == 201, added.text

    inventory = await client.get(f"/stores/{store['id']}/inventory")
    assert inventory.json() == [
        {
            "product_id": product_id,
            "product_name": "Rice 5kg",
            "category": "grocery",
            "price": "12.50",
            "weight": "0.00",
            "quantity": 10,
        }
    ]

    by_vendor = await client.get(f"/vendors/{vendor['id']}/products")
    assert [p["name"] for p in by_vendor.json()] == ["Rice 5kg"]
    assert (await client.get(f"/products/{product_id}")).json()["price"] == "12.50"
