"""
Product and product manager models.
"""
from django.db import models
from django.db.models import Q

from core.domain.value_objects import ManagerPermission, ManagerRole


class Product(models.Model):
    """
    Represents a product that devices are licensed for.
    Owns license types, features, versions, devices and managers.
    """

    code = models.CharField(max_length=64, unique=True, help_text="Unique product code")
    name = models.CharField(max_length=255, unique=True, help_text="Unique display name")
    product_type = models.CharField(max_length=64, default="default")
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class ProductManager(models.Model):
    """
    A user's role on one product.

    ``user_id`` is the account id of the external identity store, not a
    foreign key to it.
    """

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="managers")
    user_id = models.BigIntegerField(db_index=True)
    role = models.CharField(
        max_length=16,
        choices=[(role.value, role.value) for role in ManagerRole],
        default=ManagerRole.ASSISTANT.value,
    )
    permission = models.CharField(
        max_length=16,
        choices=[(permission.value, permission.value) for permission in ManagerPermission],
        default=ManagerPermission.default().value,
    )
    remark = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "product_managers"
        ordering = ["product", "role", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "user_id"], name="uniq_product_manager_user"
            ),
            models.UniqueConstraint(
                fields=["product"],
                condition=Q(role="main"),
                name="uniq_product_main_manager",
            ),
        ]

    def __str__(self):
        return f"{self.product_id}:{self.user_id} ({self.role})"
