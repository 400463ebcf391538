"""Product routes."""

from fastapi import APIRouter, Depends, status
from libs.db.session import get_async_db
from services.delivery_service.schemas import ProductCreate, ProductResponse
from services.delivery_service.services.catalog_ops import create_product, get_product
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_endpoint(
    body: ProductCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Add a product to a vendor's catalog. The vendor must exist."""
    return await create_product(db, **body.model_dump())


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product_endpoint(
    product_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    return await get_product(db, product_id)
