"""Vendor, store, product and inventory schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class VendorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    contact_email: EmailStr
    address: str = Field(default="", max_length=500)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class VendorSummary(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float

    model_config = ConfigDict(from_attributes=True)


class VendorResponse(VendorSummary):
    contact_email: str
    address: str


class StoreCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=500)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    is_active: bool = True


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    is_active: Optional[bool] = None


class StoreSummary(BaseModel):
    id: int
    name: str
    address: str
    latitude: float
    longitude: float

    model_config = ConfigDict(from_attributes=True)


class StoreResponse(StoreSummary):
    is_active: bool


class ProductCreate(BaseModel):
    vendor_id: int
    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(ge=0, max_digits=18, decimal_places=2)
    weight: Decimal = Field(default=Decimal("0.00"), ge=0, max_digits=18, decimal_places=2)
    category: str = Field(default="", max_length=100)


class ProductResponse(BaseModel):
    id: int
    vendor_id: int
    name: str
    price: Decimal
    weight: Decimal
    category: str

    model_config = ConfigDict(from_attributes=True)


class InventoryAddRequest(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class InventoryItemResponse(BaseModel):
    product_id: int
    product_name: str
    category: str
    price: Decimal
    weight: Decimal
    quantity: int
