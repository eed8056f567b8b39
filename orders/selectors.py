"""Read-only order queries."""

from typing import Optional

from django.db.models import QuerySet

from .models import Order


def _with_relations(qs: QuerySet) -> QuerySet:
    return qs.select_related("address", "user").prefetch_related("items")


def get_order(order_id: int) -> Optional[Order]:
    """Return the order with items and address loaded, or None."""

    return _with_relations(Order.objects.filter(id=order_id)).first()


def list_orders_for_user(user_id: int) -> QuerySet[Order]:
    return _with_relations(Order.objects.filter(user_id=user_id)).order_by("-created_at", "-id")


def find_order_for_tracking(reference, email: str) -> Optional[Order]:
    """Anonymous lookup: order reference plus the email the order was placed with."""

    return _with_relations(
        Order.objects.filter(reference=reference, customer_email__iexact=(email or "").strip())
    ).first()
