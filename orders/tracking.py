"""Read-only tracking view derived from an order's status and timestamps.

Nothing here is persisted. Payment and processing times are synthetic
offsets from the order's creation time; the tracking number is derived
from the order's reference and is not a carrier number.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from common.choices import OrderStatus
from django.utils import timezone

from .models import Order, OrderItem

PAYMENT_OFFSET = timedelta(minutes=15)
PROCESSING_OFFSET = timedelta(hours=2)


@dataclass
class TrackingEvent:
    timestamp: datetime
    status: str
    title: str
    description: str
    location: str


@dataclass
class TrackingView:
    order_id: int
    number: int
    reference: str
    status: str
    customer_name: str
    customer_email: str
    total_amount: Decimal
    created_at: datetime
    shipped_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    address: object
    tracking_number: str
    estimated_delivery: Optional[date]
    items: List[OrderItem] = field(default_factory=list)
    events: List[TrackingEvent] = field(default_factory=list)


def tracking_number(order: Order) -> str:
    return f"TR{order.created_at:%y%m%d}{order.reference.hex[:8].upper()}"


def tracking_events(order: Order) -> List[TrackingEvent]:
    status = OrderStatus(order.status)
    events = [
        TrackingEvent(
            timestamp=order.created_at,
            status=OrderStatus.PENDING,
            title="Order Placed",
            description="Your order has been placed and is awaiting payment confirmation.",
            location="Online Store",
        )
    ]
    # Cancelled and refunded rank above paid, so they keep these events too.
    if status.at_least(OrderStatus.PAID):
        events.append(
            TrackingEvent(
                timestamp=order.created_at + PAYMENT_OFFSET,
                status=OrderStatus.PAID,
                title="Payment Confirmed",
                description="Payment has been confirmed and your order is being prepared.",
                location="Payment Processing Center",
            )
        )
    if status.at_least(OrderStatus.PROCESSING):
        events.append(
            TrackingEvent(
                timestamp=order.created_at + PROCESSING_OFFSET,
                status=OrderStatus.PROCESSING,
                title="Order Processing",
                description="Your order is being prepared and packaged for shipment.",
                location="Fulfillment Center",
            )
        )
    if order.shipped_at:
        events.append(
            TrackingEvent(
                timestamp=order.shipped_at,
                status=OrderStatus.SHIPPED,
                title="Order Shipped",
                description="Your order has been shipped and is on its way to your address.",
                location="Distribution Center",
            )
        )
    if order.delivered_at:
        city = getattr(order.address, "city", "") if order.address_id else ""
        events.append(
            TrackingEvent(
                timestamp=order.delivered_at,
                status=OrderStatus.DELIVERED,
                title="Order Delivered",
                description="Your order has been delivered to your address.",
                location=city or "Delivery Address",
            )
        )
    if status == OrderStatus.CANCELLED:
        events.append(
            TrackingEvent(
                timestamp=order.updated_at or order.created_at,
                status=OrderStatus.CANCELLED,
                title="Order Cancelled",
                description="This order has been cancelled. Any payment will be refunded within 3-5 business days.",
                location="Customer Service",
            )
        )
    return sorted(events, key=lambda e: e.timestamp)


def estimated_delivery(order: Order, now: Optional[datetime] = None) -> Optional[date]:
    now = now or timezone.now()
    status = OrderStatus(order.status)
    if status in (OrderStatus.PENDING, OrderStatus.PAID):
        return (now + timedelta(days=5)).date()
    if status == OrderStatus.PROCESSING:
        return (now + timedelta(days=3)).date()
    if status == OrderStatus.SHIPPED:
        return ((order.shipped_at or now) + timedelta(days=2)).date()
    return None


def build_tracking(order: Order, now: Optional[datetime] = None) -> TrackingView:
    """Assemble the tracking view for an order (items and address should be prefetched)."""

    cancelled = order.status == OrderStatus.CANCELLED
    return TrackingView(
        order_id=order.id,
        number=order.number,
        reference=str(order.reference),
        status=order.status,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        total_amount=order.total_amount,
        created_at=order.created_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        cancelled_at=order.updated_at if cancelled else None,
        address=order.address,
        tracking_number=tracking_number(order),
        estimated_delivery=estimated_delivery(order, now=now),
        items=list(order.items.all()),
        events=tracking_events(order),
    )
