"""Serializers for the customer domain."""

from drf_spectacular.utils import OpenApiExample, extend_schema_serializer
from rest_framework import serializers

from .models import Address


@extend_schema_serializer(
    examples=[
        OpenApiExample(
            "Address",
            value={
                "id": 10,
                "title": "Home",
                "name": "John Doe",
                "addr1": "123 Main St",
                "addr2": "Apt 4",
                "city": "Lagos",
                "state": "Lagos",
                "postal_code": "123456",
                "country_code": "NG",
                "phone": "+2347012345678",
                "contact_phone": "+2347012345678",
            },
            response_only=True,
        ),
    ]
)
class AddressSerializer(serializers.ModelSerializer):
    """Serialize postal addresses with the effective contact phone."""

    contact_phone = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Address
        fields = (
            "id",
            "title",
            "name",
            "addr1",
            "addr2",
            "city",
            "state",
            "postal_code",
            "country_code",
            "phone",
            "contact_phone",
        )
        read_only_fields = ("id", "contact_phone")

    def get_contact_phone(self, obj: Address) -> str | None:
        return obj.contact_phone()

    def validate_phone(self, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip()

    def validate_country_code(self, value: str) -> str:
        return (value or "").strip().upper()
