"""Inventory services (single-location): transactional stock movements.

`Product.stock` is the single source of truth for how many units can be
sold. Every change goes through this module and leaves a `StockMovement`.
"""

import logging

from catalog.models import Product
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import StockMovement

logger = logging.getLogger("avthrift.inventory")


class MovementError(Exception):
    pass


@transaction.atomic
def apply_movement(*, product_id: int, movement_type: str, quantity: int, reason: str = "", reference: str = ""):
    """Apply a signed movement to a product's stock.

    quantity: positive for inbound/additions, negative for outbound/deductions.
    movement_type: label for admin/documentation; logic is driven by sign.
    """
    if quantity == 0:
        return None
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise MovementError("Product not found")

    if quantity < 0 and abs(quantity) > int(product.stock):
        raise MovementError("Insufficient available quantity")
    product.stock = int(product.stock) + int(quantity)
    product.save(update_fields=["stock", "updated_at"])
    movement = StockMovement.objects.create(
        product=product,
        movement_type=movement_type,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )
    logger.info(
        "inventory.movement_applied",
        extra={
            "event": "inventory.movement_applied",
            "product_id": product.id,
            "movement_type": movement_type,
            "quantity": quantity,
            "stock": product.stock,
            "reference": reference,
        },
    )
    return movement


def restock(*, product_id: int, quantity: int, reason: str = "restock", reference: str = ""):
    if quantity <= 0:
        raise MovementError("Restock quantity must be positive")
    return apply_movement(
        product_id=product_id,
        movement_type=StockMovement.TYPE_INBOUND,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )


@transaction.atomic
def consume_stock(*, product_id: int, quantity: int, reason: str = "order", reference: str = "") -> StockMovement:
    """Atomically take `quantity` units out of a product's stock.

    The decrement is a single conditional UPDATE guarded by ``stock >= quantity``;
    when no row is affected the stock was insufficient (or the product is gone)
    and nothing changes.
    """

    if quantity <= 0:
        raise MovementError("Consumed quantity must be positive")
    updated = Product.objects.filter(id=product_id, stock__gte=quantity).update(
        stock=F("stock") - quantity, updated_at=timezone.now()
    )
    if updated != 1:
        raise MovementError("Insufficient available quantity")
    return StockMovement.objects.create(
        product_id=product_id,
        movement_type=StockMovement.TYPE_OUTBOUND,
        quantity=-int(quantity),
        reason=reason,
        reference=reference,
    )


def available_quantity(*, product_id: int) -> int:
    stock = Product.objects.filter(id=product_id).values_list("stock", flat=True).first()
    return int(stock or 0)
