"""
Django admin configuration for licenses app.
"""
from django.contrib import admin

from licenses.infrastructure.models import LicenseType, ProductFeature
from products.admin import ReadOnlyAdmin


@admin.register(LicenseType)
class LicenseTypeAdmin(ReadOnlyAdmin):
    """Admin interface for LicenseType model."""

    list_display = ["license_code", "type_name", "product", "feature_count", "created_at"]
    list_filter = ["product"]
    search_fields = ["license_code", "type_name", "product__code"]

    def feature_count(self, obj):
        """Display number of features bundled in this license type."""
        return obj.features.count()

    feature_count.short_description = "Features"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product")


@admin.register(ProductFeature)
class ProductFeatureAdmin(ReadOnlyAdmin):
    """Admin interface for ProductFeature model."""

    list_display = ["feature_code", "feature_name", "product", "created_at"]
    list_filter = ["product"]
    search_fields = ["feature_code", "feature_name", "product__code"]
