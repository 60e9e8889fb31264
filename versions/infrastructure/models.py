"""
Firmware and software version models.
"""
from django.db import models


class FirmwareVersion(models.Model):
    """A firmware release of a product."""

    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="firmware_versions"
    )
    version = models.CharField(max_length=64)
    release_date = models.DateTimeField()
    remark = models.CharField(max_length=255, blank=True, default="")
    created_by = models.BigIntegerField()
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "firmware_versions"
        ordering = ["-release_date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "version"], name="uniq_firmware_version_per_product"
            ),
        ]

    def __str__(self):
        return f"firmware {self.version}"


class SoftwareVersion(models.Model):
    """A software release of a product."""

    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="software_versions"
    )
    version = models.CharField(max_length=64)
    release_date = models.DateTimeField()
    update_log = models.TextField(blank=True, default="")
    remark = models.CharField(max_length=255, blank=True, default="")
    features = models.ManyToManyField(
        "licenses.ProductFeature", related_name="software_versions", blank=True
    )
    firmware_versions = models.ManyToManyField(
        FirmwareVersion, related_name="software_versions", blank=True
    )
    created_by = models.BigIntegerField()
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "software_versions"
        ordering = ["-release_date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "version"], name="uniq_software_version_per_product"
            ),
        ]

    def __str__(self):
        return f"software {self.version}"
