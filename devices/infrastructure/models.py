"""
Device models.
"""
from django.db import models


class Device(models.Model):
    """
    A licensed device.

    ``sn`` is unique across all products; the license type must belong to
    the device's product.
    """

    sn = models.CharField(max_length=128, unique=True, db_index=True)
    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="devices"
    )
    license_type = models.ForeignKey(
        "licenses.LicenseType", on_delete=models.PROTECT, related_name="devices"
    )
    oem_tag = models.CharField(max_length=64, blank=True, default="")
    remark = models.CharField(max_length=255, blank=True, default="")
    created_by = models.BigIntegerField()
    created_at = models.DateTimeField()
    updated_by = models.BigIntegerField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "devices"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "license_type"]),
            models.Index(fields=["oem_tag"]),
        ]

    def __str__(self):
        return self.sn
