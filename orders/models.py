import uuid
from decimal import Decimal

from common.choices import OrderStatus
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Purchase order capturing a snapshot of a user's cart at checkout.

    `number` is the human-facing sequential order number; `reference` is an
    opaque identifier used for tracking numbers and anonymous lookups.
    """

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_PAID = OrderStatus.PAID
    STATUS_PROCESSING = OrderStatus.PROCESSING
    STATUS_SHIPPED = OrderStatus.SHIPPED
    STATUS_DELIVERED = OrderStatus.DELIVERED
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_REFUNDED = OrderStatus.REFUNDED
    STATUS_CHOICES = OrderStatus.choices

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders", on_delete=models.CASCADE)
    number = models.BigIntegerField(unique=True)
    reference = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    customer_email = models.EmailField(max_length=200)
    customer_name = models.CharField(max_length=100)
    address = models.ForeignKey("customer.Address", related_name="orders", on_delete=models.PROTECT)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "status", "created_at"], name="order_user_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="order_total_non_negative", check=models.Q(total_amount__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.number} user={self.user_id} status={self.status}"


class OrderItem(TimeStampedModel):
    """Line item within an order.

    Product name and unit price are copied at checkout so later catalog
    changes never alter a placed order.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(
        "catalog.Product", related_name="order_items", null=True, blank=True, on_delete=models.SET_NULL
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", check=models.Q(price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", check=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal("0.00")) * Decimal(int(self.quantity))


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.CASCADE)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
