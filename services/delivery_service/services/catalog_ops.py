"""Catalog reads and writes: vendors, stores, products, store inventory.

Also hosts the price lookup the delivery ledger uses to freeze totals.
"""

from decimal import Decimal
from typing import Iterable, Optional

from libs.common.errors import InvalidArgumentError, NotFoundError
from libs.common.logging import get_logger
from services.delivery_service.models import Product, Store, StoreProduct, Vendor
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_vendor(db: AsyncSession, vendor_id: int) -> Vendor:
    vendor = await db.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFoundError(f"Vendor {vendor_id} not found")
    return vendor


async def get_store(db: AsyncSession, store_id: int) -> Store:
    store = await db.get(Store, store_id)
    if store is None:
        raise NotFoundError(f"Store {store_id} not found")
    return store


async def get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


async def list_vendors(db: AsyncSession) -> list[Vendor]:
    result = await db.execute(select(Vendor).order_by(Vendor.id))
    return list(result.scalars().all())


async def list_stores(db: AsyncSession, *, active_only: bool = False) -> list[Store]:
    """Stores in identity order."""
    query = select(Store).order_by(Store.id)
    if active_only:
        query = query.where(Store.is_active.is_(True))
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_vendor_products(db: AsyncSession, vendor_id: int) -> list[Product]:
    """Products sold by a vendor. Raises NotFoundError for an unknown vendor."""
    await get_vendor(db, vendor_id)
    result = await db.execute(
        select(Product).where(Product.vendor_id == vendor_id).order_by(Product.id)
    )
    return list(result.scalars().all())


async def get_unit_prices(
    db: AsyncSession, product_ids: Iterable[int]
) -> dict[int, Decimal]:
    """Current catalog price per product id.

    Unknown ids are absent from the result rather than an error.
    """
    ids = set(product_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(Product.id, Product.price).where(Product.id.in_(ids))
    )
    return {product_id: Decimal(price) for product_id, price in result.all()}


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_vendor(
    db: AsyncSession,
    *,
    name: str,
    contact_email: str,
    latitude: float,
    longitude: float,
    address: str = "",
) -> Vendor:
    existing = await db.execute(select(Vendor.id).where(Vendor.name == name))
    if existing.scalar_one_or_none() is not None:
        raise InvalidArgumentError(f"Vendor with name '{name}' already exists.")

    vendor = Vendor(
        name=name,
        contact_email=contact_email,
        address=address,
        latitude=latitude,
        longitude=longitude,
    )
    db.add(vendor)
    await db.commit()
    await db.refresh(vendor)
    logger.info("Created vendor %s (%s)", vendor.id, vendor.name)
    return vendor


async def create_store(
    db: AsyncSession,
    *,
    name: str,
    address: str,
    latitude: float,
    longitude: float,
    is_active: bool = True,
) -> Store:
    existing = await db.execute(select(Store.id).where(Store.name == name))
    if existing.scalar_one_or_none() is not None:
        raise InvalidArgumentError(f"Store with name '{name}' already exists.")

    store = Store(
        name=name,
        address=address,
        latitude=latitude,
        longitude=longitude,
        is_active=is_active,
    )
    db.add(store)
    await db.commit()
    await db.refresh(store)
    logger.info("Created store %s (%s, active=%s)", store.id, store.name, is_active)
    return store


async def update_store(
    db: AsyncSession,
    store_id: int,
    *,
    name: Optional[str] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    is_active: Optional[bool] = None,
) -> Store:
    """Patch a store. Existing deliveries keep the coordinates they captured."""
    store = await get_store(db, store_id)

    if name is not None and name != store.name:
        clash = await db.execute(
            select(Store.id).where(Store.name == name, Store.id != store_id)
        )
        if clash.scalar_one_or_none() is not None:
            raise InvalidArgumentError(f"Store with name '{name}' already exists.")
        store.name = name
    if address is not None:
        store.address = address
    if latitude is not None:
        store.latitude = latitude
    if longitude is not None:
        store.longitude = longitude
    if is_active is not None:
        store.is_active = is_active

    await db.commit()
    await db.refresh(store)
    return store


async def create_product(
    db: AsyncSession,
    *,
    vendor_id: int,
    name: str,
    price: Decimal,
    weight: Decimal = Decimal("0.00"),
    category: str = "",
) -> Product:
    try:
        await get_vendor(db, vendor_id)
    except NotFoundError:
        raise InvalidArgumentError(
            f"Vendor with id {vendor_id} does not exist."
        ) from None

    product = Product(
        vendor_id=vendor_id,
        name=name,
        price=price,
        weight=weight,
        category=category,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


async def list_store_inventory(db: AsyncSession, store_id: int) -> list[StoreProduct]:
    """In-stock inventory rows for a store."""
    await get_store(db, store_id)
    result = await db.execute(
        select(StoreProduct)
        .where(StoreProduct.store_id == store_id, StoreProduct.quantity > 0)
        .order_by(StoreProduct.product_id)
    )
    return list(result.scalars().all())


async def add_store_inventory(
    db: AsyncSession, store_id: int, *, product_id: int, quantity: int
) -> StoreProduct:
    """Add stock for a product at a store, accumulating onto existing stock."""
    await get_store(db, store_id)
    await get_product(db, product_id)

    row = await db.get(StoreProduct, (store_id, product_id))
    if row is not None:
        row.quantity += quantity
        logger.info(
            "Updated inventory: store %s, product %s, new quantity %d",
            store_id,
            product_id,
            row.quantity,
        )
    else:
        row = StoreProduct(store_id=store_id, product_id=product_id, quantity=quantity)
        db.add(row)
        logger.info(
            "Added inventory: store %s, product %s, quantity %d",
            store_id,
            product_id,
            quantity,
        )

    await db.commit()
    await db.refresh(row)
    return row
