from django.urls import path

from .views import MovementListView, ProductMovementCreateView

urlpatterns = [
    path("movements/", MovementListView.as_view(), name="movement-list"),
    path("products/<int:product_id>/movements/", ProductMovementCreateView.as_view(), name="product-movement-create"),
]
