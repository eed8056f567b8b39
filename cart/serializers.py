"""Cart serializers for read and write operations."""

from django.conf import settings
from rest_framework import serializers

from .models import CartItem
from .selectors import cart_totals
from .services import add_item


def _max_line_quantity() -> int:
    return int(getattr(settings, "CART_MAX_LINE_QUANTITY", 99))


class CartItemReadSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source="product.id")
    product_name = serializers.CharField(source="product.name")
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "line_total",
        ]


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart summary and items."""

    id = serializers.IntegerField()
    items = CartItemReadSerializer(many=True)
    total_items = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)

    @classmethod
    def from_cart(cls, *, cart):
        totals = cart_totals(cart=cart)
        return cls(
            {
                "id": cart.id,
                "items": list(cart.items.select_related("product").all()),
                "total_items": totals["total_items"],
                "subtotal": totals["subtotal"],
            }
        )


class AddItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)

    def validate_quantity(self, value):
        if value > _max_line_quantity():
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {_max_line_quantity()}.")
        return value

    def create(self, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return add_item(user=user, **validated_data)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for updating a cart item quantity (0 removes the line)."""

    quantity = serializers.IntegerField(min_value=0)

    def validate_quantity(self, value):
        if value > _max_line_quantity():
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {_max_line_quantity()}.")
        return value
