from decimal import Decimal

import pytest
from cart.models import CartItem
from cart.services import add_item
from catalog.models import Product
from catalog.tests.factories import ProductFactory
from customer.tests.factories import AddressFactory
from django.db import IntegrityError
from inventory.models import StockMovement
from inventory.services import MovementError
from orders import services
from orders.models import Order
from orders.services import AddressNotFound, EmptyCart, InsufficientStock, create_order
from orders.tests.factories import OrderFactory


def _stock(product):
    return Product.objects.get(id=product.id).stock


@pytest.mark.django_db
def test_checkout_scenario_two_products(filled_cart, checkout_kwargs, product_a, product_b):
    OrderFactory(number=100000041)

    order = create_order(**checkout_kwargs)

    assert order.total_amount == Decimal("25.00")
    assert order.items.count() == 2
    assert order.status == Order.STATUS_PENDING
    assert order.number == 100000042
    assert not CartItem.objects.filter(cart__user=filled_cart).exists()
    assert _stock(product_a) == 8
    assert _stock(product_b) == 3


@pytest.mark.django_db
def test_order_items_copy_name_and_price(filled_cart, checkout_kwargs, product_a):
    order = create_order(**checkout_kwargs)

    item = order.items.get(product=product_a)
    assert item.product_name == "Product A"
    assert item.price == Decimal("10.00")
    assert item.quantity == 2
    assert order.address.city == "Ibadan"
    assert order.customer_name == "Ada Obi"

    Product.objects.filter(id=product_a.id).update(name="Renamed")
    item.refresh_from_db()
    assert item.product_name == "Product A"


@pytest.mark.django_db
def test_first_order_number_is_seed(filled_cart, checkout_kwargs):
    assert create_order(**checkout_kwargs).number == 100000000


@pytest.mark.django_db
def test_order_numbers_strictly_increase(shopper, checkout_kwargs):
    numbers = []
    for _ in range(3):
        add_item(user=shopper, product_id=ProductFactory(stock=5).id, quantity=1)
        numbers.append(create_order(**checkout_kwargs).number)

    assert numbers == sorted(numbers)
    assert len(set(numbers)) == 3
    assert numbers[1] == numbers[0] + 1


@pytest.mark.django_db
def test_second_checkout_fails_with_empty_cart(filled_cart, checkout_kwargs):
    create_order(**checkout_kwargs)

    with pytest.raises(EmptyCart):
        create_order(**checkout_kwargs)
    assert Order.objects.count() == 1


@pytest.mark.django_db
def test_empty_cart_creates_nothing(checkout_kwargs):
    with pytest.raises(EmptyCart):
        create_order(**checkout_kwargs)
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_insufficient_stock_scenario(shopper, checkout_kwargs):
    product_c = ProductFactory(name="Product C", stock=10)
    add_item(user=shopper, product_id=product_c.id, quantity=5)
    Product.objects.filter(id=product_c.id).update(stock=3)

    with pytest.raises(InsufficientStock) as excinfo:
        create_order(**checkout_kwargs)

    assert excinfo.value.product_id == product_c.id
    assert excinfo.value.product_name == "Product C"
    assert excinfo.value.requested == 5
    assert excinfo.value.available == 3
    assert "Product C" in str(excinfo.value)
    assert Order.objects.count() == 0
    assert _stock(product_c) == 3
    assert CartItem.objects.get(cart__user=shopper).quantity == 5


@pytest.mark.django_db
def test_all_or_nothing_when_one_line_is_unavailable(filled_cart, checkout_kwargs, product_a, product_b):
    Product.objects.filter(id=product_b.id).update(stock=0)

    with pytest.raises(InsufficientStock) as excinfo:
        create_order(**checkout_kwargs)

    assert excinfo.value.product_id == product_b.id
    assert Order.objects.count() == 0
    assert _stock(product_a) == 10
    assert _stock(product_b) == 0
    assert CartItem.objects.filter(cart__user=filled_cart).count() == 2
    assert not StockMovement.objects.exists()


@pytest.mark.django_db
def test_failed_decrement_rolls_back_earlier_lines(filled_cart, checkout_kwargs, product_a, product_b, monkeypatch):
    real_consume = services.consume_stock

    def flaky_consume(*, product_id, quantity, **kwargs):
        if product_id == product_b.id:
            raise MovementError("Insufficient available quantity")
        return real_consume(product_id=product_id, quantity=quantity, **kwargs)

    monkeypatch.setattr(services, "consume_stock", flaky_consume)

    with pytest.raises(InsufficientStock):
        create_order(**checkout_kwargs)

    assert Order.objects.count() == 0
    assert _stock(product_a) == 10
    assert CartItem.objects.filter(cart__user=filled_cart).count() == 2


@pytest.mark.django_db
def test_duplicate_order_number_rolls_back(filled_cart, checkout_kwargs, product_a, monkeypatch):
    existing = OrderFactory()
    monkeypatch.setattr(services, "allocate_order_number", lambda: existing.number)

    with pytest.raises(IntegrityError):
        create_order(**checkout_kwargs)

    assert Order.objects.count() == 1
    assert _stock(product_a) == 10
    assert CartItem.objects.filter(cart__user=filled_cart).count() == 2


@pytest.mark.django_db
def test_price_change_after_add_does_not_change_total(filled_cart, checkout_kwargs, product_a):
    Product.objects.filter(id=product_a.id).update(price=Decimal("99.00"))

    order = create_order(**checkout_kwargs)

    assert order.total_amount == Decimal("25.00")
    assert order.items.get(product=product_a).price == Decimal("10.00")


@pytest.mark.django_db
def test_stock_movements_reference_order(filled_cart, checkout_kwargs, product_a, product_b):
    order = create_order(**checkout_kwargs)

    movements = StockMovement.objects.filter(reference=f"order:{order.number}")
    assert {(m.product_id, m.quantity) for m in movements} == {(product_a.id, -2), (product_b.id, -1)}
    assert all(m.movement_type == StockMovement.TYPE_OUTBOUND for m in movements)


@pytest.mark.django_db
def test_address_must_belong_to_user(filled_cart, checkout_kwargs):
    foreign = AddressFactory()

    with pytest.raises(AddressNotFound):
        create_order(**{**checkout_kwargs, "address_id": foreign.id})
    with pytest.raises(AddressNotFound):
        create_order(**{**checkout_kwargs, "address_id": foreign.id + 1000})
    assert CartItem.objects.filter(cart__user=filled_cart).count() == 2


@pytest.mark.django_db
def test_empty_cart_is_reported_before_bad_address(checkout_kwargs):
    with pytest.raises(EmptyCart):
        create_order(**{**checkout_kwargs, "address_id": 999999})
