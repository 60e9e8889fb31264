"""
Django admin configuration for devices app.
"""
from django.contrib import admin

from devices.infrastructure.models import Device
from products.admin import ReadOnlyAdmin


@admin.register(Device)
class DeviceAdmin(ReadOnlyAdmin):
    """Admin interface for Device model."""

    list_display = ["sn", "product", "license_type", "oem_tag", "updated_at"]
    list_filter = ["product", "oem_tag"]
    search_fields = ["sn", "oem_tag", "remark"]
    readonly_fields = ["created_by", "created_at", "updated_by", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product", "license_type")
