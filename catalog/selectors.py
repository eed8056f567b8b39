"""Selectors for the catalog domain.

Read-only query helpers that keep views thin.
"""

from typing import Iterable, Optional

from django.db.models import QuerySet

from .models import Category, Product


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return active categories, by ``sort_order`` then ``name`` unless told otherwise."""

    ordering = list(ordering or ("sort_order", "name"))
    return Category.objects.filter(is_active=True).order_by(*ordering)


def list_products() -> QuerySet[Product]:
    """Return active products with their category joined.

    Filtering, search and ordering are applied by the view's filter backends.
    """

    return Product.objects.filter(is_active=True).select_related("category").order_by("name")
