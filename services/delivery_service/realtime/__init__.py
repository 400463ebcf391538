"""Live delivery tracking fan-out."""

from services.delivery_service.realtime.notifier import (
    GLOBAL_GROUP,
    DeliveryEvent,
    RealtimeNotifier,
    Subscriber,
    delivery_group,
)

__all__ = [
    "GLOBAL_GROUP",
    "DeliveryEvent",
    "RealtimeNotifier",
    "Subscriber",
    "delivery_group",
]
