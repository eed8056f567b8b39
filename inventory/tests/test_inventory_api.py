import pytest
from cart.tests.factories import UserFactory
from catalog.tests.factories import ProductFactory
from inventory.models import StockMovement
from rest_framework.test import APIClient


@pytest.fixture
def staff_client():
    client = APIClient()
    client.force_authenticate(user=UserFactory(is_staff=True))
    return client


@pytest.mark.django_db
def test_movements_list_filters(staff_client):
    p = ProductFactory(stock=10)
    m_in = StockMovement.objects.create(product=p, movement_type=StockMovement.TYPE_INBOUND, quantity=5)
    m_out = StockMovement.objects.create(product=p, movement_type=StockMovement.TYPE_OUTBOUND, quantity=-2)

    resp_all = staff_client.get("/api/v1/inventory/movements/")
    assert resp_all.status_code == 200
    all_ids = {row["id"] for row in resp_all.json()["results"]}
    assert m_in.id in all_ids and m_out.id in all_ids

    resp_in = staff_client.get(f"/api/v1/inventory/movements/?movement_type={StockMovement.TYPE_INBOUND}")
    assert resp_in.status_code == 200
    in_ids = {row["id"] for row in resp_in.json()["results"]}
    assert m_in.id in in_ids and m_out.id not in in_ids


@pytest.mark.django_db
def test_apply_movement_endpoint_restocks_and_rejects_overdraft(staff_client):
    p = ProductFactory(stock=1)

    r = staff_client.post(
        f"/api/v1/inventory/products/{p.id}/movements/",
        {"movement_type": "in", "quantity": 4, "reason": "delivery"},
        format="json",
    )
    assert r.status_code == 201
    assert r.json()["quantity"] == 4
    p.refresh_from_db()
    assert p.stock == 5

    r_bad = staff_client.post(
        f"/api/v1/inventory/products/{p.id}/movements/",
        {"movement_type": "out", "quantity": -9},
        format="json",
    )
    assert r_bad.status_code == 400
    p.refresh_from_db()
    assert p.stock == 5

    r_sign = staff_client.post(
        f"/api/v1/inventory/products/{p.id}/movements/",
        {"movement_type": "in", "quantity": -1},
        format="json",
    )
    assert r_sign.status_code == 400


@pytest.mark.django_db
def test_inventory_endpoints_require_staff():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    p = ProductFactory()
    assert client.get("/api/v1/inventory/movements/").status_code == 403
    r = client.post(f"/api/v1/inventory/products/{p.id}/movements/", {"movement_type": "in", "quantity": 1})
    assert r.status_code == 403
