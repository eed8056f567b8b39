"""Selectors for read-only cart queries."""

from decimal import Decimal

from django.db.models import F, Sum

from .models import Cart


def get_cart_for_user(*, user) -> Cart:
    """Return the user's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def cart_totals(*, cart: Cart):
    """Compute cart totals based on items."""

    agg = cart.items.aggregate(
        subtotal=Sum(F("unit_price") * F("quantity")),
        total_items=Sum("quantity"),
    )
    return {
        "subtotal": agg.get("subtotal") or Decimal("0.00"),
        "total_items": int(agg.get("total_items") or 0),
    }
