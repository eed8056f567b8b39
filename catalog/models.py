"""Catalog app models.

Defines the sellable entities: categories and products. The product row
owns the available-to-sell `stock` counter consumed by checkout.
"""

from decimal import Decimal

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Flat product categorization."""

    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Product(TimeStampedModel):
    """Sellable product with a price and an available-to-sell stock count.

    `stock` is only ever decremented by the inventory services, which refuse
    to drive it below zero.
    """

    category = models.ForeignKey(
        Category,
        related_name="products",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    stock = models.IntegerField(default=0)
    image_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(name="product_stock_non_negative", check=models.Q(stock__gte=0)),
            models.CheckConstraint(name="product_price_non_negative", check=models.Q(price__gte=0)),
        ]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    @property
    def in_stock(self) -> bool:
        return int(self.stock) > 0
