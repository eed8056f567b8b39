"""Customer API views for addresses.

Endpoints are authenticated and scoped to the current user.
"""

from django.db.models import ProtectedError
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response

from .models import Address
from .selectors import list_addresses
from .serializers import AddressSerializer


class AddressListCreateView(generics.ListCreateAPIView):
    """List and create addresses for the authenticated user."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = AddressSerializer
    filterset_fields = ["city", "country_code"]
    ordering_fields = ["updated_at", "id", "city"]
    throttle_scope = "addresses"

    @extend_schema(tags=["Customer Endpoints"], summary="List current user's addresses")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Create a new address",
        examples=[
            OpenApiExample(
                "Create address",
                value={
                    "title": "Home",
                    "name": "John Doe",
                    "addr1": "123 Main St",
                    "city": "Lagos",
                    "postal_code": "123456",
                    "country_code": "NG",
                },
                request_only=True,
            )
        ],
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def perform_create(self, serializer: AddressSerializer) -> None:
        serializer.save(user=self.request.user)


class AddressDetailView(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update, or delete an address owned by the authenticated user.

    Addresses used as an order's shipping destination cannot be deleted (409).
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = AddressSerializer
    throttle_scope = "addresses"
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return list_addresses(self.request.user.id)

    @extend_schema(tags=["Customer Endpoints"], summary="Get an address")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(tags=["Customer Endpoints"], summary="Update an address")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)

    @extend_schema(
        tags=["Customer Endpoints"],
        summary="Delete an address",
        examples=[OpenApiExample("In use", value={"detail": "Address is used by an order."}, response_only=True)],
    )
    def delete(self, request, *args, **kwargs):
        instance: Address = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response({"detail": "Address is used by an order."}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)
