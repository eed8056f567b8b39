from decimal import Decimal

import pytest
from cart.models import Cart, CartItem
from cart.selectors import cart_totals, get_cart_for_user
from cart.services import CartError, add_item, clear_cart, remove_item, update_item_quantity
from cart.tests.factories import UserFactory
from catalog.tests.factories import ProductFactory
from django.http import Http404
from django.test import override_settings


@pytest.mark.django_db
def test_cart_is_created_lazily_once():
    user = UserFactory()
    assert not Cart.objects.filter(user=user).exists()

    first = get_cart_for_user(user=user)
    second = get_cart_for_user(user=user)

    assert first.id == second.id
    assert Cart.objects.filter(user=user).count() == 1


@pytest.mark.django_db
def test_add_item_snapshots_unit_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("25.00"), stock=10)

    item = add_item(user=user, product_id=product.id, quantity=2)

    assert item.product_id == product.id
    assert item.quantity == 2
    assert item.unit_price == Decimal("25.00")


@pytest.mark.django_db
def test_add_same_product_increments_line_and_keeps_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("10.00"), stock=10)
    add_item(user=user, product_id=product.id, quantity=2)

    product.price = Decimal("99.00")
    product.save(update_fields=["price", "updated_at"])
    item = add_item(user=user, product_id=product.id, quantity=3)

    assert CartItem.objects.filter(cart__user=user).count() == 1
    assert item.quantity == 5
    assert item.unit_price == Decimal("10.00")


@pytest.mark.django_db
def test_add_item_rejects_more_than_stock():
    user = UserFactory()
    product = ProductFactory(stock=3)
    add_item(user=user, product_id=product.id, quantity=2)

    with pytest.raises(CartError):
        add_item(user=user, product_id=product.id, quantity=2)

    assert CartItem.objects.get(cart__user=user).quantity == 2


@pytest.mark.django_db
def test_add_item_rejects_inactive_and_missing_products():
    user = UserFactory()
    product = ProductFactory(is_active=False)

    with pytest.raises(CartError):
        add_item(user=user, product_id=product.id, quantity=1)
    with pytest.raises(Http404):
        add_item(user=user, product_id=product.id + 1000, quantity=1)
    with pytest.raises(CartError):
        add_item(user=user, product_id=product.id, quantity=0)


@pytest.mark.django_db
@override_settings(CART_MAX_LINE_QUANTITY=5)
def test_add_item_respects_line_quantity_cap():
    user = UserFactory()
    product = ProductFactory(stock=50)

    with pytest.raises(CartError):
        add_item(user=user, product_id=product.id, quantity=6)


@pytest.mark.django_db
def test_update_quantity_and_zero_removes_line():
    user = UserFactory()
    product = ProductFactory(stock=10)
    item = add_item(user=user, product_id=product.id, quantity=1)

    updated = update_item_quantity(user=user, item_id=item.id, quantity=4)
    assert updated.quantity == 4

    with pytest.raises(CartError):
        update_item_quantity(user=user, item_id=item.id, quantity=11)

    assert update_item_quantity(user=user, item_id=item.id, quantity=0) is None
    assert not CartItem.objects.filter(id=item.id).exists()


@pytest.mark.django_db
def test_remove_and_clear():
    user = UserFactory()
    p1 = ProductFactory(stock=5)
    p2 = ProductFactory(stock=5)
    i1 = add_item(user=user, product_id=p1.id, quantity=1)
    add_item(user=user, product_id=p2.id, quantity=1)

    remove_item(user=user, item_id=i1.id)
    # Removing twice is harmless
    remove_item(user=user, item_id=i1.id)
    assert CartItem.objects.filter(cart__user=user).count() == 1

    clear_cart(user=user)
    assert CartItem.objects.filter(cart__user=user).count() == 0


@pytest.mark.django_db
def test_cart_totals_use_snapshot_prices():
    user = UserFactory()
    p1 = ProductFactory(price=Decimal("25.00"), stock=10)
    p2 = ProductFactory(price=Decimal("10.00"), stock=10)
    add_item(user=user, product_id=p1.id, quantity=2)
    add_item(user=user, product_id=p2.id, quantity=1)

    totals = cart_totals(cart=get_cart_for_user(user=user))

    assert totals["subtotal"] == Decimal("60.00")
    assert totals["total_items"] == 3


@pytest.mark.django_db
def test_cannot_touch_another_users_line():
    owner = UserFactory()
    other = UserFactory()
    product = ProductFactory(stock=5)
    item = add_item(user=owner, product_id=product.id, quantity=1)

    with pytest.raises(Http404):
        update_item_quantity(user=other, item_id=item.id, quantity=2)
    remove_item(user=other, item_id=item.id)
    assert CartItem.objects.filter(id=item.id).exists()
