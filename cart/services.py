"""Cart services: line mutations validated against product stock."""

import logging
from decimal import Decimal

from catalog.models import Product
from django.conf import settings
from django.db import transaction
from django.shortcuts import get_object_or_404

from .models import CartItem
from .selectors import get_cart_for_user


class CartError(Exception):
    """Raised for cart mutation failures."""


logger = logging.getLogger("avthrift.cart")


def _check_quantity(product: Product, quantity: int) -> None:
    limit = int(getattr(settings, "CART_MAX_LINE_QUANTITY", 99))
    if quantity > limit:
        raise CartError(f"Quantity cannot exceed {limit}")
    if quantity > int(product.stock):
        raise CartError(f"Only {product.stock} of {product.name} available")


@transaction.atomic
def add_item(*, user, product_id: int, quantity: int) -> CartItem:
    """Add a product to the user's cart.

    Adding a product that is already in the cart increments its line; the
    unit price captured when the line was created is kept.
    """

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    cart = get_cart_for_user(user=user)
    product = get_object_or_404(Product, id=product_id)
    if not product.is_active:
        raise CartError("Product is not available")

    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()
    if item is not None:
        new_quantity = int(item.quantity) + int(quantity)
        _check_quantity(product, new_quantity)
        item.quantity = new_quantity
        item.save(update_fields=["quantity", "updated_at"])
        event = "cart.item_updated"
    else:
        _check_quantity(product, quantity)
        item = CartItem.objects.create(
            cart=cart,
            product=product,
            quantity=quantity,
            unit_price=product.price or Decimal("0.00"),
        )
        event = "cart.item_added"
    logger.info(
        event,
        extra={
            "event": event,
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "product_id": product.id,
            "quantity": item.quantity,
        },
    )
    return item


@transaction.atomic
def update_item_quantity(*, user, item_id: int, quantity: int):
    """Set a line's quantity; zero or less removes the line and returns None."""

    cart = get_cart_for_user(user=user)
    item = get_object_or_404(CartItem.objects.select_for_update().select_related("product"), id=item_id, cart=cart)
    if quantity <= 0:
        remove_item(user=user, item_id=item.id)
        return None
    _check_quantity(item.product, quantity)
    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "product_id": item.product_id,
            "quantity": quantity,
        },
    )
    return item


@transaction.atomic
def remove_item(*, user, item_id: int) -> None:
    cart = get_cart_for_user(user=user)
    deleted, _ = CartItem.objects.filter(id=item_id, cart=cart).delete()
    if not deleted:
        return
    logger.info(
        "cart.item_removed",
        extra={
            "event": "cart.item_removed",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "item_id": item_id,
        },
    )


@transaction.atomic
def clear_cart(*, user) -> None:
    cart = get_cart_for_user(user=user)
    CartItem.objects.filter(cart=cart).delete()
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "cart_id": cart.id, "user_id": getattr(user, "id", None)},
    )
