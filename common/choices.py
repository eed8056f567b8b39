"""Shared enumerations and choices used across apps."""

from django.db import models


class MovementType(models.TextChoices):
    INBOUND = "in", "Inbound"
    OUTBOUND = "out", "Outbound"
    ADJUST = "adjust", "Adjust"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders.

    Declaration order is meaningful: it defines the ranking used for
    comparisons such as "at least paid".
    """

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def at_least(self, other: "OrderStatus") -> bool:
        return self.rank >= OrderStatus(other).rank
