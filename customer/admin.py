from django.contrib import admin

from .models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "title", "name", "city", "postal_code", "country_code")
    list_filter = ("country_code",)
    search_fields = ("name", "addr1", "city", "postal_code", "user__email", "user__username")
    ordering = ("-updated_at", "id")
