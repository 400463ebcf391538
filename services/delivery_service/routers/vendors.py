"""Vendor routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.db.session import get_async_db
from services.delivery_service.schemas import (
    ProductResponse,
    VendorCreate,
    VendorResponse,
)
from services.delivery_service.services.catalog_ops import (
    create_vendor,
    get_vendor,
    list_vendor_products,
    list_vendors,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=List[VendorResponse])
async def list_vendors_endpoint(db: AsyncSession = Depends(get_async_db)):
    return await list_vendors(db)


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor_endpoint(
    vendor_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await get_vendor(db, vendor_id)


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor_endpoint(
    body: VendorCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Register a vendor. Names are unique."""
    return await create_vendor(db, **body.model_dump())


@router.get("/{vendor_id}/products", response_model=List[ProductResponse])
async def vendor_products(
    vendor_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await list_vendor_products(db, vendor_id)
