"""Store and store inventory routes."""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from libs.db.session import get_async_db
from services.delivery_service.models import StoreProduct
from services.delivery_service.schemas import (
    InventoryAddRequest,
    InventoryItemResponse,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
)
from services.delivery_service.services.catalog_ops import (
    add_store_inventory,
    create_store,
    get_store,
    list_store_inventory,
    list_stores,
    update_store,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/stores", tags=["stores"])


def _inventory_item(row: StoreProduct) -> InventoryItemResponse:
    return InventoryItemResponse(
        product_id=row.product_id,
        product_name=row.product.name,
        category=row.product.category,
        price=row.product.price,
        weight=row.product.weight,
        quantity=row.quantity,
    )


@router.get("", response_model=List[StoreResponse])
async def list_stores_endpoint(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_async_db),
):
    return await list_stores(db, active_only=active_only)


@router.get("/{store_id}", response_model=StoreResponse)
async def get_store_endpoint(
    store_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await get_store(db, store_id)


@router.post("", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def create_store_endpoint(
    body: StoreCreate,
    db: AsyncSession = Depends(get_async_db),
):
    return await create_store(db, **body.model_dump())


@router.patch("/{store_id}", response_model=StoreResponse)
async def update_store_endpoint(
    store_id: int,
    body: StoreUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    """Partially update a store. Deactivated stores stop receiving matches."""
    return await update_store(db, store_id, **body.model_dump(exclude_unset=True))


@router.get("/{store_id}/inventory", response_model=List[InventoryItemResponse])
async def get_inventory(
    store_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    rows = await list_store_inventory(db, store_id)
    return [_inventory_item(row) for row in rows]


@router.post(
    "/{store_id}/inventory",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_inventory(
    store_id: int,
    body: InventoryAddRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Add stock; quantities accumulate onto what the store already holds."""
    row = await add_store_inventory(
        db, store_id, product_id=body.product_id, quantity=body.quantity
    )
    return _inventory_item(row)
