"""Delivery aggregate: header, frozen line items and the GPS breadcrumb ledger."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.delivery_service.models.enums import DeliveryStatus, DeliveryType, enum_values
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Delivery(Base):
    """An order tracked from creation to a terminal status.

    Field ownership:
      - vendor_id, store_id, total_amount, from_*/to_*, created_at are written
        once by the ledger at creation.
      - status, assigned_at, delivered_at, driver_id, gps_tracker_id, type are
        written by the ledger afterwards.
      - current_*, last_location_update, tracking_notes are written only by
        the location tracker.
      - payment_* belong to the external payment workflow.
    """

    __tablename__ = "deliveries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vendor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    store_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stores.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), default=Decimal("0.00"), nullable=False
    )
    status: Mapped[DeliveryStatus] = mapped_column(
        SAEnum(
            DeliveryStatus,
            name="delivery_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=DeliveryStatus.PENDING_PAYMENT,
        index=True,
        nullable=False,
    )
    type: Mapped[DeliveryType] = mapped_column(
        SAEnum(
            DeliveryType,
            name="delivery_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=DeliveryType.STANDARD,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    assigned_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    delivered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Payment (external workflow)
    payment_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    paid_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(18, 2), nullable=True
    )

    # Courier
    driver_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gps_tracker_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Route endpoints captured at creation
    from_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    from_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    to_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    to_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Current position snapshot
    current_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    last_location_update: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    tracking_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    vendor = relationship("Vendor", lazy="selectin")
    store = relationship("Store", lazy="selectin")
    items: Mapped[list["DeliveryProduct"]] = relationship(
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DeliveryProduct.id",
        lazy="selectin",
    )
    location_history: Mapped[list["DeliveryLocationHistory"]] = relationship(
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [
            DeliveryLocationHistory.timestamp,
            DeliveryLocationHistory.id,
        ],
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Delivery {self.id} vendor={self.vendor_id} store={self.store_id} status={self.status}>"


class DeliveryProduct(Base):
    """Line item. ``unit_price`` is the catalog price captured at creation."""

    __tablename__ = "delivery_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    delivery_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("deliveries.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    __table_args__ = (CheckConstraint("quantity > 0", name="positive_quantity"),)

    product = relationship("Product", lazy="selectin")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def __repr__(self):
        return f"<DeliveryProduct delivery={self.delivery_id} product={self.product_id} qty={self.quantity}>"


class DeliveryLocationHistory(Base):
    """Append-only GPS sample. Rows are never updated or deleted individually."""

    __tablename__ = "delivery_location_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    delivery_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("deliveries.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    speed: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<DeliveryLocationHistory delivery={self.delivery_id} ({self.latitude}, {self.longitude})>"
