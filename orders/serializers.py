"""DRF serializers for Orders.

Order totals are stored at checkout from the cart's snapshot prices; the
API exposes them as-is rather than recomputing from the catalog.
"""

import re

from common.choices import OrderStatus
from customer.serializers import AddressSerializer
from rest_framework import serializers

from .models import Order, OrderItem

NAME_RE = re.compile(r"^[^\W\d_]+(?: +[^\W\d_]+)*$")


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "quantity",
            "price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    address = AddressSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "reference",
            "status",
            "total_amount",
            "customer_email",
            "customer_name",
            "address",
            "items",
            "created_at",
            "updated_at",
            "shipped_at",
            "delivered_at",
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Checkout input: contact details and the shipping address to use."""

    customer_email = serializers.EmailField(max_length=200)
    customer_name = serializers.CharField(min_length=2, max_length=100)
    address_id = serializers.IntegerField()

    def validate_customer_name(self, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Ensure this field has at least 2 characters.")
        if not NAME_RE.match(value):
            raise serializers.ValidationError("Name may contain only letters and spaces.")
        return value


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class TrackingLookupSerializer(serializers.Serializer):
    order_reference = serializers.UUIDField()
    customer_email = serializers.EmailField(max_length=200)


class TrackingEventSerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField()
    status = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()


class TrackingItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(source="line_total", max_digits=12, decimal_places=2)


class TrackingSerializer(serializers.Serializer):
    """Read-only representation of `orders.tracking.TrackingView`."""

    order_id = serializers.IntegerField()
    number = serializers.IntegerField()
    reference = serializers.CharField()
    status = serializers.CharField()
    customer_name = serializers.CharField()
    customer_email = serializers.EmailField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    created_at = serializers.DateTimeField()
    shipped_at = serializers.DateTimeField(allow_null=True)
    delivered_at = serializers.DateTimeField(allow_null=True)
    cancelled_at = serializers.DateTimeField(allow_null=True)
    shipping_address = AddressSerializer(source="address")
    items = TrackingItemSerializer(many=True)
    events = TrackingEventSerializer(many=True)
    tracking_number = serializers.CharField()
    estimated_delivery = serializers.DateField(allow_null=True)
