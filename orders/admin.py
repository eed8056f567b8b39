from django.contrib import admin, messages

from .models import IdempotencyKey, Order, OrderItem
from .transitions import set_status


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "product_name", "quantity", "price")
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "number", "status", "user", "customer_email", "total_amount", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("number", "customer_email", "customer_name", "reference")
    date_hierarchy = "created_at"
    readonly_fields = (
        "number",
        "reference",
        "status",
        "total_amount",
        "shipped_at",
        "delivered_at",
        "created_at",
        "updated_at",
    )
    raw_id_fields = ("user", "address")
    inlines = [OrderItemInline]
    actions = ["mark_processing", "mark_shipped", "mark_delivered"]

    def _set(self, request, queryset, status):
        for order in queryset:
            set_status(order, status)
        messages.success(request, f"Updated {queryset.count()} order(s) to {status}.")

    @admin.action(description="Mark as processing")
    def mark_processing(self, request, queryset):
        self._set(request, queryset, Order.STATUS_PROCESSING)

    @admin.action(description="Mark as shipped")
    def mark_shipped(self, request, queryset):
        self._set(request, queryset, Order.STATUS_SHIPPED)

    @admin.action(description="Mark as delivered")
    def mark_delivered(self, request, queryset):
        self._set(request, queryset, Order.STATUS_DELIVERED)


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product", "product_name", "quantity", "price")
    search_fields = ("product_name", "order__number")
    raw_id_fields = ("order", "product")


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "path", "method", "response_code", "created_at")
    list_filter = ("method", "response_code", "created_at")
    search_fields = ("key", "scope", "path")
    date_hierarchy = "created_at"
