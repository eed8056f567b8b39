"""Inventory models (single-location, product-level).

The counter itself is `catalog.Product.stock`; this app keeps the audit
trail of every signed change applied to it.
"""

from common.choices import MovementType
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockMovement(TimeStampedModel):
    TYPE_INBOUND = MovementType.INBOUND
    TYPE_OUTBOUND = MovementType.OUTBOUND
    TYPE_ADJUST = MovementType.ADJUST
    TYPE_CHOICES = MovementType.choices

    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="movements")
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.IntegerField()  # signed: +inbound, -outbound
    reason = models.CharField(max_length=200, blank=True)
    reference = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="movement_non_zero", check=~models.Q(quantity=0)),
        ]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["reference"], name="movement_reference_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.movement_type} {self.quantity} for {self.product_id}"
