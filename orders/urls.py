"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    OrderCancelView,
    OrderDetailView,
    OrderListCreateView,
    OrderPayView,
    OrderStatusUpdateView,
    OrderTrackingLookupView,
    OrderTrackingView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("track/", OrderTrackingLookupView.as_view(), name="order-track"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/status/", OrderStatusUpdateView.as_view(), name="order-status"),
    path("<int:order_id>/pay/", OrderPayView.as_view(), name="order-pay"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("<int:order_id>/tracking/", OrderTrackingView.as_view(), name="order-tracking"),
]
