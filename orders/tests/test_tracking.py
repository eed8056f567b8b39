from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from orders.models import Order
from orders.tests.factories import OrderFactory, OrderItemFactory
from orders.tracking import build_tracking, estimated_delivery, tracking_number

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
CREATED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _order(**fields):
    order = OrderFactory(**fields)
    Order.objects.filter(id=order.id).update(created_at=CREATED, updated_at=CREATED + timedelta(hours=5))
    return Order.objects.select_related("address").prefetch_related("items").get(id=order.id)


def _titles(view):
    return [e.title for e in view.events]


@pytest.mark.django_db
def test_pending_order_has_only_placed_event():
    view = build_tracking(_order(status=Order.STATUS_PENDING), now=NOW)

    assert _titles(view) == ["Order Placed"]
    assert view.events[0].timestamp == CREATED
    assert view.events[0].location == "Online Store"
    assert view.estimated_delivery == date(2026, 3, 15)
    assert view.cancelled_at is None


@pytest.mark.django_db
def test_processing_order_events_and_estimate():
    view = build_tracking(_order(status=Order.STATUS_PROCESSING), now=NOW)

    assert _titles(view) == ["Order Placed", "Payment Confirmed", "Order Processing"]
    assert view.events[1].timestamp == CREATED + timedelta(minutes=15)
    assert view.events[2].timestamp == CREATED + timedelta(hours=2)
    assert view.estimated_delivery == date(2026, 3, 13)


@pytest.mark.django_db
def test_shipped_order_estimate_from_ship_date():
    shipped = CREATED + timedelta(days=1)
    view = build_tracking(_order(status=Order.STATUS_SHIPPED, shipped_at=shipped), now=NOW)

    assert _titles(view)[-1] == "Order Shipped"
    assert view.events[-1].timestamp == shipped
    assert view.estimated_delivery == date(2026, 3, 4)


@pytest.mark.django_db
def test_delivered_event_uses_address_city_and_no_estimate():
    order = _order(
        status=Order.STATUS_DELIVERED,
        shipped_at=CREATED + timedelta(days=1),
        delivered_at=CREATED + timedelta(days=3),
    )
    view = build_tracking(order, now=NOW)

    assert _titles(view) == [
        "Order Placed",
        "Payment Confirmed",
        "Order Processing",
        "Order Shipped",
        "Order Delivered",
    ]
    assert view.events[-1].location == order.address.city
    assert view.estimated_delivery is None


@pytest.mark.django_db
def test_cancelled_order_timeline_sorted_by_time():
    view = build_tracking(_order(status=Order.STATUS_CANCELLED), now=NOW)

    # cancelled ranks above paid and processing, so those synthetic events are present
    assert _titles(view) == ["Order Placed", "Payment Confirmed", "Order Processing", "Order Cancelled"]
    timestamps = [e.timestamp for e in view.events]
    assert timestamps == sorted(timestamps)
    assert view.cancelled_at == CREATED + timedelta(hours=5)
    assert view.estimated_delivery is None


@pytest.mark.django_db
def test_refunded_order_has_no_estimate():
    assert estimated_delivery(_order(status=Order.STATUS_REFUNDED), now=NOW) is None


@pytest.mark.django_db
def test_tracking_number_is_deterministic():
    order = _order()
    expected = "TR260301" + order.reference.hex[:8].upper()

    assert tracking_number(order) == expected
    assert build_tracking(order, now=NOW).tracking_number == expected
    assert build_tracking(order, now=NOW + timedelta(days=30)).tracking_number == expected


@pytest.mark.django_db
def test_view_carries_order_details_and_items():
    order = _order(total_amount=Decimal("30.00"))
    OrderItemFactory(order=order, quantity=2, price=Decimal("15.00"))
    order = Order.objects.select_related("address").prefetch_related("items").get(id=order.id)

    view = build_tracking(order, now=NOW)

    assert view.number == order.number
    assert view.total_amount == Decimal("30.00")
    assert view.customer_email == order.customer_email
    assert view.address.id == order.address_id
    assert [item.line_total for item in view.items] == [Decimal("30.00")]
