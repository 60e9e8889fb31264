"""
Product domain entity.

This is the root of the entitlement hierarchy: license types, features,
versions, devices and managers all hang off a product.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

DEFAULT_PRODUCT_TYPE = "default"


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    ``code`` and ``name`` are each globally unique.
    """

    id: Optional[int]
    code: str
    name: str
    product_type: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.code or not self.code.strip():
            raise ValueError("Product code cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Product name cannot be empty")
        if len(self.code) > 64:
            raise ValueError("Product code too long")
        if len(self.name) > 255:
            raise ValueError("Product name too long")

    @classmethod
    def create(cls, code: str, name: str, product_type: str = "") -> "Product":
        """
        Create a new Product entity.

        Args:
            code: Unique product code
            name: Unique display name
            product_type: Free-form category, "default" when empty

        Returns:
            Product entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            code=code.strip(),
            name=name.strip(),
            product_type=(product_type or "").strip() or DEFAULT_PRODUCT_TYPE,
            created_at=now,
            updated_at=now,
        )

    def with_changes(
        self, name: Optional[str] = None, product_type: Optional[str] = None
    ) -> "Product":
        """
        Create a new Product instance with updated name and/or type.

        Args:
            name: New name, unchanged when None or blank
            product_type: New type, unchanged when None or blank

        Returns:
            New Product instance
        """
        return Product(
            id=self.id,
            code=self.code,
            name=name.strip() if name and name.strip() else self.name,
            product_type=(
                product_type.strip() if product_type and product_type.strip() else self.product_type
            ),
            created_at=self.created_at,
            updated_at=timezone.now(),
        )
