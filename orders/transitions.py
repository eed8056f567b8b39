"""Order status changes.

`set_status` is the administrative setter and accepts any target status.
Customer-facing operations (`pay_order`, `cancel_order`) consult the
legal-transition table and refuse anything outside it.
"""

import logging
from typing import Optional

from common.choices import OrderStatus
from django.db import transaction
from django.utils import timezone

from .models import Order

logger = logging.getLogger("avthrift.orders")

LEGAL_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.REFUNDED: set(),
}


class OrderStateError(Exception):
    """Raised when a customer-facing operation is not allowed in the order's status."""


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in LEGAL_TRANSITIONS[OrderStatus(current)]


def set_status(order: Order, status: str) -> Order:
    """Set an order's status, stamping shipment and delivery times on first entry.

    Transitions outside the legal table are applied but logged as overrides.
    """

    target = OrderStatus(status)
    prev = OrderStatus(order.status)
    fields = ["status", "updated_at"]
    now = timezone.now()
    if target == OrderStatus.SHIPPED and order.shipped_at is None:
        order.shipped_at = now
        fields.append("shipped_at")
    if target == OrderStatus.DELIVERED and order.delivered_at is None:
        order.delivered_at = now
        fields.append("delivered_at")

    if prev != target and not can_transition(prev, target):
        logger.warning(
            "order.status_override",
            extra={
                "event": "order.status_override",
                "order_id": order.id,
                "status_from": prev.value,
                "status_to": target.value,
            },
        )

    order.status = target.value
    order.save(update_fields=fields)
    if prev != target:
        logger.info(
            "order_status_changed",
            extra={
                "event": "order_status_changed",
                "order_id": order.id,
                "user_id": order.user_id,
                "status_from": prev.value,
                "status_to": target.value,
            },
        )
    return order


@transaction.atomic
def update_order_status(order_id: int, status: str) -> Optional[Order]:
    """Set the status of the order with the given id; None when it does not exist."""

    order = Order.objects.select_for_update().filter(id=order_id).first()
    if order is None:
        return None
    return set_status(order, status)


@transaction.atomic
def pay_order(order: Order) -> Order:
    """Record a successful (simulated) payment for a pending order.

    The status is checked against the locked row, not the caller's copy.
    """

    order = Order.objects.select_for_update().get(pk=order.pk)
    if order.status == OrderStatus.PAID:
        return order
    if not can_transition(order.status, OrderStatus.PAID):
        raise OrderStateError(f"Cannot pay an order that is {order.status}")
    return set_status(order, OrderStatus.PAID)


@transaction.atomic
def cancel_order(order: Order) -> Order:
    """Cancel an order that has not started processing."""

    order = Order.objects.select_for_update().get(pk=order.pk)
    if order.status == OrderStatus.CANCELLED:
        return order
    if not can_transition(order.status, OrderStatus.CANCELLED):
        raise OrderStateError(f"Cannot cancel an order that is {order.status}")
    return set_status(order, OrderStatus.CANCELLED)
