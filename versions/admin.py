"""
Django admin configuration for versions app.
"""
from django.contrib import admin

from products.admin import ReadOnlyAdmin
from versions.infrastructure.models import FirmwareVersion, SoftwareVersion


@admin.register(FirmwareVersion)
class FirmwareVersionAdmin(ReadOnlyAdmin):
    list_display = ["version", "product", "release_date", "created_by"]
    list_filter = ["product", "release_date"]
    search_fields = ["version", "product__code"]


@admin.register(SoftwareVersion)
class SoftwareVersionAdmin(ReadOnlyAdmin):
    """Admin interface for SoftwareVersion model."""

    list_display = ["version", "product", "release_date", "created_by"]
    list_filter = ["product", "release_date"]
    search_fields = ["version", "product__code"]
    filter_horizontal = ["features", "firmware_versions"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product")
