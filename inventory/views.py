"""Inventory staff endpoints: movement ledger and manual stock movements."""

from catalog.models import Product
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import StockMovement
from .serializers import MovementCreateSerializer, StockMovementSerializer
from .services import MovementError, apply_movement


class MovementListView(generics.ListAPIView):
    permission_classes = [IsAdminUser]
    serializer_class = StockMovementSerializer
    filterset_fields = ["product", "movement_type", "reference"]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List stock movements",
        description="List movements (inbound/outbound/adjust). Filters: product, movement_type, reference.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return StockMovement.objects.select_related("product").order_by("-created_at", "-id")


class ProductMovementCreateView(APIView):
    """Apply a signed stock movement to a product (restock, write-off, correction)."""

    permission_classes = [IsAdminUser]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Apply stock movement",
        request=MovementCreateSerializer,
        responses={
            201: StockMovementSerializer,
            400: inline_serializer(name="MovementError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample(
                "Restock",
                value={"movement_type": "in", "quantity": 12, "reason": "supplier delivery"},
                request_only=True,
            )
        ],
    )
    def post(self, request, product_id: int):
        product = get_object_or_404(Product, id=product_id)
        serializer = MovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            movement = apply_movement(product_id=product.id, **serializer.validated_data)
        except MovementError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
