"""Enum definitions for delivery service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class DeliveryStatus(str, enum.Enum):
    """Delivery lifecycle, in declared order.

    PENDING_PAYMENT -> PAID -> ASSIGNED -> IN_TRANSIT -> DELIVERED, with
    CANCELLED reachable from any non-terminal state. The ledger does not
    enforce this ordering; see ``delivery_ledger.update_status``.
    """

    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED})
TRACKABLE_STATUSES = frozenset({DeliveryStatus.ASSIGNED, DeliveryStatus.IN_TRANSIT})


class DeliveryType(str, enum.Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"
