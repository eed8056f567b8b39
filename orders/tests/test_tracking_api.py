import pytest
from cart.tests.factories import UserFactory
from orders.models import Order
from orders.tests.factories import OrderFactory, OrderItemFactory
from rest_framework.test import APIClient


@pytest.fixture
def order():
    order = OrderFactory(status=Order.STATUS_PROCESSING)
    OrderItemFactory(order=order, quantity=2)
    return order


@pytest.mark.django_db
def test_owner_can_read_tracking(order):
    client = APIClient()
    client.force_authenticate(user=order.user)

    resp = client.get(f"/api/v1/orders/{order.id}/tracking/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["number"] == order.number
    assert body["tracking_number"].startswith("TR")
    assert [e["title"] for e in body["events"]] == ["Order Placed", "Payment Confirmed", "Order Processing"]
    assert body["estimated_delivery"] is not None
    assert body["items"][0]["quantity"] == 2
    assert body["shipping_address"]["id"] == order.address_id
    assert body["cancelled_at"] is None


@pytest.mark.django_db
def test_staff_can_read_any_tracking_but_others_cannot(order):
    staff = APIClient()
    staff.force_authenticate(user=UserFactory(is_staff=True))
    assert staff.get(f"/api/v1/orders/{order.id}/tracking/").status_code == 200

    stranger = APIClient()
    stranger.force_authenticate(user=UserFactory())
    assert stranger.get(f"/api/v1/orders/{order.id}/tracking/").status_code == 404


@pytest.mark.django_db
def test_anonymous_lookup_by_reference_and_email(order):
    resp = APIClient().post(
        "/api/v1/orders/track/",
        {"order_reference": str(order.reference), "customer_email": order.customer_email.upper()},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["order_id"] == order.id


@pytest.mark.django_db
def test_anonymous_lookup_email_mismatch_is_not_found(order):
    resp = APIClient().post(
        "/api/v1/orders/track/",
        {"order_reference": str(order.reference), "customer_email": "someone@example.com"},
        format="json",
    )
    assert resp.status_code == 404

    bad = APIClient().post("/api/v1/orders/track/", {"order_reference": "nope", "customer_email": "x@example.com"})
    assert bad.status_code == 400
