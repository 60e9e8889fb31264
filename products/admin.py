"""
Django admin configuration for products app.

Mutations must go through the API so that every change is audited;
the admin is a read-only browser.
"""
from django.contrib import admin

from products.infrastructure.models import Product, ProductManager


class ReadOnlyAdmin(admin.ModelAdmin):
    """Admin that can list and view but never write."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ProductManagerInline(admin.TabularInline):
    model = ProductManager
    extra = 0
    fields = ["user_id", "role", "permission", "remark"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(ReadOnlyAdmin):
    """Admin interface for Product model."""

    list_display = ["code", "name", "product_type", "device_count", "created_at"]
    list_filter = ["product_type", "created_at"]
    search_fields = ["code", "name"]
    inlines = [ProductManagerInline]

    def device_count(self, obj):
        """Display number of devices for this product."""
        return obj.devices.count()

    device_count.short_description = "Devices"


@admin.register(ProductManager)
class ProductManagerAdmin(ReadOnlyAdmin):
    list_display = ["product", "user_id", "role", "permission", "updated_at"]
    list_filter = ["role", "permission"]
    search_fields = ["product__code", "product__name", "user_id"]
