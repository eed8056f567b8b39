from decimal import Decimal

import pytest
from cart.services import add_item
from cart.tests.factories import UserFactory
from catalog.tests.factories import ProductFactory
from customer.tests.factories import AddressFactory


@pytest.fixture
def shopper():
    return UserFactory()


@pytest.fixture
def address(shopper):
    return AddressFactory(user=shopper, city="Ibadan")


@pytest.fixture
def product_a():
    return ProductFactory(name="Product A", price=Decimal("10.00"), stock=10)


@pytest.fixture
def product_b():
    return ProductFactory(name="Product B", price=Decimal("5.00"), stock=4)


@pytest.fixture
def filled_cart(shopper, product_a, product_b):
    """2 x Product A @ 10.00 and 1 x Product B @ 5.00."""

    add_item(user=shopper, product_id=product_a.id, quantity=2)
    add_item(user=shopper, product_id=product_b.id, quantity=1)
    return shopper


@pytest.fixture
def checkout_kwargs(shopper, address):
    return {"user": shopper, "customer_email": shopper.email, "customer_name": "Ada Obi", "address_id": address.id}
