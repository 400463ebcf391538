"""Shared dependencies and helper functions for delivery service routers."""

from typing import Iterable

from fastapi import Request
from services.delivery_service.models import Delivery
from services.delivery_service.realtime.notifier import RealtimeNotifier
from services.delivery_service.schemas import DeliverySummaryResponse, LineItemIn
from services.delivery_service.services.store_matcher import LineItemRequest


def get_notifier(request: Request) -> RealtimeNotifier:
    """Process-wide notifier created by ``create_app``."""
    return request.app.state.notifier


def to_line_items(products: Iterable[LineItemIn]) -> list[LineItemRequest]:
    return [
        LineItemRequest(product_id=p.product_id, quantity=p.quantity)
        for p in products
    ]


def to_summary(delivery: Delivery) -> DeliverySummaryResponse:
    return DeliverySummaryResponse(
        id=delivery.id,
        vendor_id=delivery.vendor_id,
        store_id=delivery.store_id,
        vendor_name=delivery.vendor.name,
        store_name=delivery.store.name,
        status=delivery.status,
        total_amount=delivery.total_amount,
        created_at=delivery.created_at,
        assigned_at=delivery.assigned_at,
        driver_id=delivery.driver_id,
    )
