"""Serializers for inventory domain."""

from rest_framework import serializers

from .models import StockMovement


class StockMovementSerializer(serializers.ModelSerializer):
    """Read-only representation of stock movements."""

    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "product",
            "product_name",
            "movement_type",
            "quantity",
            "reason",
            "reference",
            "created_at",
        ]
        read_only_fields = fields


class MovementCreateSerializer(serializers.Serializer):
    """Write serializer for a signed stock movement applied by staff."""

    movement_type = serializers.ChoiceField(choices=StockMovement.TYPE_CHOICES)
    quantity = serializers.IntegerField()
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    reference = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        qty = attrs["quantity"]
        if qty == 0:
            raise serializers.ValidationError({"quantity": "Quantity must be non-zero."})
        if attrs["movement_type"] == StockMovement.TYPE_INBOUND and qty < 0:
            raise serializers.ValidationError({"quantity": "Inbound movements must be positive."})
        if attrs["movement_type"] == StockMovement.TYPE_OUTBOUND and qty > 0:
            raise serializers.ValidationError({"quantity": "Outbound movements must be negative."})
        return attrs
