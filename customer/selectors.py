"""Read-only data access helpers for the customer app."""

from typing import Optional

from django.db.models import QuerySet

from .models import Address


def list_addresses(user_id: int) -> QuerySet[Address]:
    """Return all addresses owned by the given user id."""

    return Address.objects.filter(user_id=user_id).order_by("-updated_at", "id")


def get_address(address_id: int) -> Optional[Address]:
    return Address.objects.select_related("user").filter(id=address_id).first()
