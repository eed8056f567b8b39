"""Read-only viewsets for catalog resources."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets

from . import selectors
from .models import Category, Product
from .serializers import CategorySerializer, ProductSerializer


@extend_schema_view(
    list=extend_schema(
        summary="List categories",
        description="Returns active categories ordered by sort_order then name",
        tags=["Catalog Endpoints"],
    ),
    retrieve=extend_schema(
        summary="Get category by slug",
        tags=["Catalog Endpoints"],
    ),
)
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CategorySerializer
    lookup_field = "slug"
    throttle_scope = "catalog"

    def get_queryset(self):
        return selectors.list_categories()


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    min_price = filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = filters.NumberFilter(field_name="price", lookup_expr="lte")
    in_stock = filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["category", "min_price", "max_price", "in_stock"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock=0)


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns active products with price and current stock. Supports filtering by `category`, "
            "`min_price`, `max_price` and `in_stock`, ordering by `name`, `price` or `created_at`, "
            "and search via `search`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("in_stock", OpenApiTypes.BOOL, location="query", description="Only (un)available"),
        ],
        examples=[
            OpenApiExample(
                "Product list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 7,
                            "name": "Vintage Jacket",
                            "slug": "vintage-jacket",
                            "description": "",
                            "price": "25.00",
                            "stock": 3,
                            "in_stock": True,
                            "image_url": "",
                            "category": None,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(
        summary="Get product by slug",
        tags=["Catalog Endpoints"],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    lookup_field = "slug"
    lookup_value_regex = "[^/]+"
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"
    filter_backends = [
        filters.DjangoFilterBackend,
        drf_filters.OrderingFilter,
        drf_filters.SearchFilter,
    ]
    ordering_fields = ["name", "price", "created_at"]
    search_fields = ["name", "description", "category__name"]

    def get_queryset(self):
        return selectors.list_products()
