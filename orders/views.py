"""Orders API endpoints: checkout, reads, status changes and tracking."""

import logging

from common.choices import OrderStatus
from django.db import DatabaseError
from django.http import Http404
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .selectors import find_order_for_tracking, get_order, list_orders_for_user
from .serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    TrackingLookupSerializer,
    TrackingSerializer,
)
from .services import AddressNotFound, CheckoutError, compute_request_hash, create_order, with_idempotency
from .tracking import build_tracking
from .transitions import OrderStateError, cancel_order, pay_order, update_order_status

logger = logging.getLogger("avthrift.orders")

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)

ERROR_RESPONSE = inline_serializer(
    name="OrderError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField(required=False)},
)


def _respond(request, handler) -> Response:
    """Run a mutation handler, replaying a stored response when an Idempotency-Key is sent."""

    idem_key = request.headers.get("Idempotency-Key")
    if idem_key:
        body, code = with_idempotency(
            key=idem_key,
            user=request.user,
            path=str(request.path),
            method=str(request.method),
            request_hash=compute_request_hash(getattr(request, "data", None)),
            handler=handler,
        )
        return Response(body, status=code)
    body, code = handler()
    return Response(body, status=code)


class OrderFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(choices=OrderStatus.choices)
    number = filters.NumberFilter(field_name="number")
    start = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    end = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "number", "start", "end"]


class OrderListCreateView(generics.ListAPIView):
    """List the current user's orders, or check out the cart into a new order."""

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filterset_class = OrderFilterSet
    ordering_fields = ["created_at", "number", "total_amount"]

    def get_throttles(self):
        self.throttle_scope = "orders_write" if self.request.method == "POST" else "orders"
        return super().get_throttles()

    def get_queryset(self):
        return list_orders_for_user(self.request.user.id)

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List current user's orders, newest first. Filters: status, number, start, end (ISO datetimes).",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Create order from cart",
        description=(
            "Checks out the authenticated user's cart. Stock is validated for every line first; "
            "the order is created, stock consumed and the cart cleared together or not at all. "
            "Idempotent when Idempotency-Key header is set."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
        examples=[
            OpenApiExample(
                "Checkout",
                value={"customer_email": "ada@example.com", "customer_name": "Ada Obi", "address_id": 10},
                request_only=True,
            ),
            OpenApiExample(
                "Insufficient stock",
                value={
                    "detail": "Insufficient stock for product: Denim jacket",
                    "code": "insufficient_stock",
                    "product_id": 7,
                    "product_name": "Denim jacket",
                    "requested": 5,
                    "available": 3,
                },
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                order = create_order(user=request.user, **serializer.validated_data)
            except AddressNotFound as exc:
                return exc.as_dict(), 404
            except CheckoutError as exc:
                return exc.as_dict(), 400
            except DatabaseError:
                logger.exception(
                    "order.create_failed",
                    extra={"event": "order.create_failed", "user_id": request.user.id},
                )
                return {"detail": "Unable to create order."}, 500
            return OrderSerializer(order, context={"request": request}).data, 201

        return _respond(request, _handler)


class OrderDetailView(generics.RetrieveAPIView):
    """Retrieve a single order owned by the authenticated user (staff may read any)."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    serializer_class = OrderSerializer

    def get_object(self):
        order = get_order(int(self.kwargs["order_id"]))
        if order is None or (order.user_id != self.request.user.id and not self.request.user.is_staff):
            raise Http404("Not found.")
        return order

    @extend_schema(tags=["Orders"], summary="Get order detail")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderStatusUpdateView(APIView):
    """Administrative status change; any status may be set."""

    permission_classes = [IsAdminUser]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Update order status (admin)",
        description=(
            "Sets the order status directly. Entering `shipped` or `delivered` stamps the matching "
            "timestamp the first time only. Transitions outside the normal lifecycle are allowed and logged."
        ),
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer, 404: ERROR_RESPONSE},
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = update_order_status(order_id, serializer.validated_data["status"])
        if order is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        logger.info(
            "order.status_set_by_admin",
            extra={"event": "order.status_set_by_admin", "order_id": order.id, "admin_id": request.user.id},
        )
        return Response(OrderSerializer(get_order(order.id)).data, status=status.HTTP_200_OK)


class _OwnerOrderMutationView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"
    operation = None  # set by subclasses

    def post(self, request, order_id: int):
        try:
            order = Order.objects.get(pk=order_id, user=request.user)
        except Order.DoesNotExist:
            raise Http404

        def _handler():
            try:
                updated = self.operation(order)
            except OrderStateError as exc:
                return {"detail": str(exc), "code": "invalid_status"}, 400
            return OrderSerializer(get_order(updated.id), context={"request": request}).data, 200

        return _respond(request, _handler)


class OrderPayView(_OwnerOrderMutationView):
    """Record a simulated payment for a pending order."""

    operation = staticmethod(pay_order)

    @extend_schema(
        tags=["Orders"],
        summary="Pay order",
        description="Marks a pending order as paid. Idempotent when Idempotency-Key header is set.",
        parameters=[IDEMPOTENCY_HEADER],
        request=None,
        responses={200: OrderSerializer, 400: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def post(self, request, order_id: int):
        return super().post(request, order_id)


class OrderCancelView(_OwnerOrderMutationView):
    """Cancel an order that is still pending or paid."""

    operation = staticmethod(cancel_order)

    @extend_schema(
        tags=["Orders"],
        summary="Cancel order",
        description="Cancels a pending or paid order. Idempotent when Idempotency-Key header is set.",
        parameters=[IDEMPOTENCY_HEADER],
        request=None,
        responses={200: OrderSerializer, 400: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def post(self, request, order_id: int):
        return super().post(request, order_id)


class OrderTrackingView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "tracking"

    @extend_schema(
        tags=["Orders"],
        summary="Get order tracking",
        description="Timeline of tracking events, tracking number and estimated delivery for an order.",
        responses={200: TrackingSerializer, 404: ERROR_RESPONSE},
    )
    def get(self, request, order_id: int):
        order = get_order(order_id)
        if order is None or (order.user_id != request.user.id and not request.user.is_staff):
            raise Http404
        return Response(TrackingSerializer(build_tracking(order)).data)


class OrderTrackingLookupView(APIView):
    """Anonymous tracking lookup by order reference and the email used at checkout."""

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "tracking"

    @extend_schema(
        tags=["Orders"],
        summary="Track order by reference",
        request=TrackingLookupSerializer,
        responses={200: TrackingSerializer, 404: ERROR_RESPONSE},
        examples=[
            OpenApiExample(
                "Lookup",
                value={"order_reference": "3f2b8c1e-0d4a-4c55-9a0e-5d1f2a7b9c10", "customer_email": "ada@example.com"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = TrackingLookupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = find_order_for_tracking(
            serializer.validated_data["order_reference"], serializer.validated_data["customer_email"]
        )
        if order is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(TrackingSerializer(build_tracking(order)).data)
