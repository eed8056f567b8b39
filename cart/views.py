"""DRF views for cart operations."""

from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import CartItem
from .selectors import get_cart_for_user
from .serializers import AddItemSerializer, CartReadSerializer, UpdateItemQuantitySerializer
from .services import CartError, clear_cart, remove_item, update_item_quantity


class CartDetailView(APIView):
    """Return the authenticated user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the authenticated user's cart including items and totals.",
        responses={200: CartReadSerializer},
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "id": 1,
                    "items": [
                        {
                            "id": 10,
                            "product_id": 100,
                            "product_name": "Denim jacket",
                            "quantity": 2,
                            "unit_price": "4999.00",
                            "line_total": "9998.00",
                        }
                    ],
                    "total_items": 2,
                    "subtotal": "9998.00",
                },
            )
        ],
    )
    def get(self, request):
        cart = get_cart_for_user(user=request.user)
        return Response(CartReadSerializer.from_cart(cart=cart).data, status=status.HTTP_200_OK)


class CartAddItemView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds a product to the user's cart. Adding a product already in the cart increases its quantity.",
        request=AddItemSerializer,
        responses={
            201: inline_serializer(
                name="CartItemCreatedResponse",
                fields={"id": rf_serializers.IntegerField(), "quantity": rf_serializers.IntegerField()},
            ),
            400: inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()}),
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Added", value={"id": 10, "quantity": 2})],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            item = serializer.save()
        except CartError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"id": item.id, "quantity": item.quantity}, status=status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Update or remove a single cart line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    def _get_item(self, request, item_id: int):
        return CartItem.objects.filter(id=item_id, cart__user_id=request.user.id).first()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description="Sets the quantity of a cart item. A quantity of 0 removes the item.",
        request=UpdateItemQuantitySerializer,
        responses={
            200: inline_serializer(
                name="CartItemUpdatedResponse",
                fields={"id": rf_serializers.IntegerField(), "quantity": rf_serializers.IntegerField()},
            ),
            204: None,
            400: inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()}),
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
    )
    def patch(self, request, item_id: int):
        item = self._get_item(request, item_id)
        if item is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = UpdateItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            updated = update_item_quantity(
                user=request.user, item_id=item.id, quantity=serializer.validated_data["quantity"]
            )
        except CartError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        if updated is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response({"id": updated.id, "quantity": updated.quantity}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Delete cart item",
        responses={
            204: None,
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
    )
    def delete(self, request, item_id: int):
        if self._get_item(request, item_id) is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        remove_item(user=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartClearView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        description="Removes every item from the user's cart.",
        request=None,
        responses={204: None},
    )
    def post(self, request):
        clear_cart(user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
