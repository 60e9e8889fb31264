"""
License type and product feature models.
"""
from django.db import models


class ProductFeature(models.Model):
    """
    A licensable capability of a product.
    ``feature_code`` is what activation files carry.
    """

    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="features"
    )
    feature_name = models.CharField(max_length=128)
    feature_code = models.CharField(max_length=64, help_text="Immutable once created")
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "product_features"
        ordering = ["product", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "feature_name"], name="uniq_feature_name_per_product"
            ),
            models.UniqueConstraint(
                fields=["product", "feature_code"], name="uniq_feature_code_per_product"
            ),
        ]

    def __str__(self):
        return f"{self.feature_code} ({self.feature_name})"


class LicenseType(models.Model):
    """
    A license tier within a product.
    """

    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="license_types"
    )
    type_name = models.CharField(max_length=128)
    license_code = models.CharField(max_length=64, help_text="Immutable once created")
    features = models.ManyToManyField(
        ProductFeature, through="LicenseTypeFeature", related_name="license_types"
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "license_types"
        ordering = ["product", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "type_name"], name="uniq_license_type_name_per_product"
            ),
            models.UniqueConstraint(
                fields=["product", "license_code"], name="uniq_license_code_per_product"
            ),
        ]

    def __str__(self):
        return f"{self.license_code} ({self.type_name})"


class LicenseTypeFeature(models.Model):
    """Join row between a license type and a feature."""

    license_type = models.ForeignKey(
        LicenseType, on_delete=models.CASCADE, related_name="feature_links"
    )
    feature = models.ForeignKey(
        ProductFeature, on_delete=models.CASCADE, related_name="license_type_links"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "license_type_features"
        constraints = [
            models.UniqueConstraint(
                fields=["license_type", "feature"], name="uniq_license_type_feature"
            ),
        ]
