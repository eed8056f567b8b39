"""Admin registration for cart models, with inline items on the cart page for support."""

from django.contrib import admin, messages

from .models import Cart, CartItem
from .services import clear_cart


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "quantity", "unit_price", "created_at", "updated_at")
    readonly_fields = ("unit_price", "created_at", "updated_at")
    raw_id_fields = ("product",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "updated_at", "created_at")
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CartItemInline]
    raw_id_fields = ("user",)
    list_select_related = ("user",)
    actions = ["action_clear_cart"]

    @admin.action(description="Clear cart")
    def action_clear_cart(self, request, queryset):
        count = 0
        for cart in queryset.select_related("user"):
            clear_cart(user=cart.user)
            count += 1
        messages.success(request, f"Cleared {count} cart(s).")


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "product", "quantity", "unit_price", "updated_at")
    search_fields = ("product__name", "cart__user__email")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("cart", "product")
