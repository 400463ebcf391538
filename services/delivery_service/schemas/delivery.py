"""Delivery request/response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import as_utc
from pydantic import BaseModel, ConfigDict, Field, field_validator
from services.delivery_service.models.enums import DeliveryStatus, DeliveryType
from services.delivery_service.schemas.catalog import ProductResponse, StoreSummary, VendorSummary


class LineItemIn(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class DeliveryRequest(BaseModel):
    """Create a delivery at the nearest active store."""

    vendor_id: int
    products: list[LineItemIn] = Field(default_factory=list)


class ManualDeliveryRequest(DeliveryRequest):
    """Create a delivery at an explicitly chosen store."""

    store_id: int


class DeliveryCreatedResponse(BaseModel):
    delivery_id: int
    store_id: int
    store_name: str
    store_address: str
    total_amount: Decimal
    estimated_delivery_time: str


class FindBestStoreResponse(BaseModel):
    store_id: int
    store_name: str
    distance_km: float


class StatusUpdateRequest(BaseModel):
    status: DeliveryStatus


class AssignDriverRequest(BaseModel):
    driver_id: str = Field(min_length=1)
    gps_tracker_id: str = Field(min_length=1)
    delivery_type: DeliveryType = DeliveryType.STANDARD


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp: Optional[datetime] = None
    speed: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class DeliveryItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    product: Optional[ProductResponse] = None

    model_config = ConfigDict(from_attributes=True)


class LocationSampleResponse(BaseModel):
    id: int
    latitude: float
    longitude: float
    timestamp: datetime
    speed: Optional[float] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class DeliveryResponse(BaseModel):
    id: int
    vendor_id: int
    store_id: int
    vendor: Optional[VendorSummary] = None
    store: Optional[StoreSummary] = None
    status: DeliveryStatus
    type: DeliveryType
    total_amount: Decimal
    created_at: datetime
    assigned_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    paid_amount: Optional[Decimal] = None
    driver_id: Optional[str] = None
    gps_tracker_id: Optional[str] = None
    from_latitude: Optional[float] = None
    from_longitude: Optional[float] = None
    to_latitude: Optional[float] = None
    to_longitude: Optional[float] = None
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    last_location_update: Optional[datetime] = None
    tracking_notes: Optional[str] = None
    items: list[DeliveryItemResponse] = Field(default_factory=list)
    location_history: list[LocationSampleResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator(
        "created_at",
        "assigned_at",
        "delivered_at",
        "payment_date",
        "last_location_update",
    )
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive datetimes.
        return as_utc(value)


class DeliverySummaryResponse(BaseModel):
    """Row for list views; no line items or history."""

    id: int
    vendor_id: int
    store_id: int
    vendor_name: str
    store_name: str
    status: DeliveryStatus
    total_amount: Decimal
    created_at: datetime
    assigned_at: Optional[datetime] = None
    driver_id: Optional[str] = None

    @field_validator("created_at", "assigned_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class DeliveryTrackingResponse(BaseModel):
    delivery_id: int
    driver_id: Optional[str] = None
    gps_tracker_id: Optional[str] = None
    status: DeliveryStatus
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    last_location_update: Optional[datetime] = None
    from_latitude: Optional[float] = None
    from_longitude: Optional[float] = None
    to_latitude: Optional[float] = None
    to_longitude: Optional[float] = None
    location_history: list[LocationSampleResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
