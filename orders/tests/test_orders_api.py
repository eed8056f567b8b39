from decimal import Decimal

import pytest
from cart.models import CartItem
from cart.tests.factories import UserFactory
from catalog.models import Product
from customer.tests.factories import AddressFactory
from django.db import DatabaseError
from orders import services
from orders.models import Order
from orders.tests.factories import OrderFactory
from rest_framework.test import APIClient


@pytest.fixture
def client(shopper):
    c = APIClient()
    c.force_authenticate(user=shopper)
    return c


@pytest.fixture
def payload(shopper, address):
    return {"customer_email": shopper.email, "customer_name": "Ada Obi", "address_id": address.id}


@pytest.mark.django_db
def test_create_order_endpoint(client, filled_cart, payload, product_a):
    resp = client.post("/api/v1/orders/", payload, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert Decimal(body["total_amount"]) == Decimal("25.00")
    assert body["number"] == 100000000
    assert len(body["items"]) == 2
    assert body["address"]["city"] == "Ibadan"
    assert not CartItem.objects.filter(cart__user=filled_cart).exists()
    assert Product.objects.get(id=product_a.id).stock == 8


@pytest.mark.django_db
def test_create_order_empty_cart(client, payload):
    resp = client.post("/api/v1/orders/", payload, format="json")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Cart is empty", "code": "empty_cart"}


@pytest.mark.django_db
def test_create_order_insufficient_stock_details(client, filled_cart, payload, product_b):
    Product.objects.filter(id=product_b.id).update(stock=0)

    resp = client.post("/api/v1/orders/", payload, format="json")

    assert resp.status_code == 400
    assert resp.json() == {
        "detail": "Insufficient stock for product: Product B",
        "code": "insufficient_stock",
        "product_id": product_b.id,
        "product_name": "Product B",
        "requested": 1,
        "available": 0,
    }
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_create_order_unknown_address(client, filled_cart, payload):
    foreign = AddressFactory()
    resp = client.post("/api/v1/orders/", {**payload, "address_id": foreign.id}, format="json")
    assert resp.status_code == 404


@pytest.mark.django_db
@pytest.mark.parametrize(
    "override",
    [
        {"customer_name": "A"},
        {"customer_name": "Ada 0bi"},
        {"customer_name": "Ada-Obi"},
        {"customer_name": "x" * 101},
        {"customer_email": "not-an-email"},
        {"customer_email": ("a" * 195) + "@example.com"},
        {"address_id": None},
    ],
)
def test_create_order_validation(client, filled_cart, payload, override):
    resp = client.post("/api/v1/orders/", {**payload, **override}, format="json")
    assert resp.status_code == 400
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_create_order_persistence_failure_returns_500(client, filled_cart, payload, monkeypatch):
    def fail():
        raise DatabaseError("disk full")

    monkeypatch.setattr(services, "allocate_order_number", fail)

    resp = client.post("/api/v1/orders/", payload, format="json")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Unable to create order."}
    assert CartItem.objects.filter(cart__user=filled_cart).count() == 2


@pytest.mark.django_db
def test_create_order_idempotent_with_key(client, filled_cart, payload):
    headers = {"HTTP_IDEMPOTENCY_KEY": "checkout-1"}
    first = client.post("/api/v1/orders/", payload, format="json", **headers)
    second = client.post("/api/v1/orders/", payload, format="json", **headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]
    assert Order.objects.count() == 1

    changed = client.post("/api/v1/orders/", {**payload, "customer_name": "Someone Else"}, format="json", **headers)
    assert changed.status_code == 409


@pytest.mark.django_db
def test_list_orders_scoped_and_filtered(client, shopper):
    mine_pending = OrderFactory(user=shopper, status=Order.STATUS_PENDING)
    mine_paid = OrderFactory(user=shopper, status=Order.STATUS_PAID)
    OrderFactory(status=Order.STATUS_PAID)

    all_ids = [o["id"] for o in client.get("/api/v1/orders/").json()["results"]]
    assert set(all_ids) == {mine_pending.id, mine_paid.id}

    paid = client.get("/api/v1/orders/?status=paid").json()["results"]
    assert [o["id"] for o in paid] == [mine_paid.id]

    by_number = client.get(f"/api/v1/orders/?number={mine_pending.number}").json()["results"]
    assert [o["id"] for o in by_number] == [mine_pending.id]


@pytest.mark.django_db
def test_order_detail_only_for_owner(client, shopper):
    mine = OrderFactory(user=shopper)
    other = OrderFactory()

    assert client.get(f"/api/v1/orders/{mine.id}/").json()["number"] == mine.number
    assert client.get(f"/api/v1/orders/{other.id}/").status_code == 404


@pytest.mark.django_db
def test_staff_can_read_any_order_detail(shopper):
    staff = APIClient()
    staff.force_authenticate(user=UserFactory(is_staff=True))
    order = OrderFactory(user=shopper)

    resp = staff.get(f"/api/v1/orders/{order.id}/")
    assert resp.status_code == 200
    assert resp.json()["number"] == order.number
    assert staff.get(f"/api/v1/orders/{order.id}/tracking/").status_code == 200


@pytest.mark.django_db
def test_pay_and_cancel_endpoints(client, shopper):
    order = OrderFactory(user=shopper)

    paid = client.post(f"/api/v1/orders/{order.id}/pay/")
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"

    cancelled = client.post(f"/api/v1/orders/{order.id}/cancel/")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = client.post(f"/api/v1/orders/{order.id}/pay/")
    assert again.status_code == 400
    assert again.json()["code"] == "invalid_status"


@pytest.mark.django_db
def test_cancel_refused_once_shipped(client, shopper):
    order = OrderFactory(user=shopper, status=Order.STATUS_SHIPPED)
    resp = client.post(f"/api/v1/orders/{order.id}/cancel/")
    assert resp.status_code == 400
    order.refresh_from_db()
    assert order.status == Order.STATUS_SHIPPED


@pytest.mark.django_db
def test_pay_other_users_order_is_not_found(client):
    assert client.post(f"/api/v1/orders/{OrderFactory().id}/pay/").status_code == 404


@pytest.mark.django_db
def test_status_update_requires_admin(client, shopper):
    order = OrderFactory(user=shopper)
    assert client.patch(f"/api/v1/orders/{order.id}/status/", {"status": "shipped"}, format="json").status_code == 403


@pytest.mark.django_db
def test_admin_status_update(shopper):
    admin = APIClient()
    admin.force_authenticate(user=UserFactory(is_staff=True))
    order = OrderFactory(user=shopper, status=Order.STATUS_PROCESSING)

    resp = admin.patch(f"/api/v1/orders/{order.id}/status/", {"status": "shipped"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == "shipped"
    assert resp.json()["shipped_at"] is not None

    assert admin.patch(f"/api/v1/orders/{order.id}/status/", {"status": "lost"}, format="json").status_code == 400
    assert admin.patch("/api/v1/orders/999999/status/", {"status": "paid"}, format="json").status_code == 404


@pytest.mark.django_db
def test_orders_require_authentication():
    assert APIClient().get("/api/v1/orders/").status_code == 401
