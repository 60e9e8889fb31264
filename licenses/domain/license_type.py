"""
LicenseType domain entity.

A license type is a tier within one product bundling a set of features.
``type_name`` may be renamed; ``license_code`` never changes once issued.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone


@dataclass(frozen=True)
class LicenseType:
    """LicenseType domain entity."""

    id: Optional[int]
    product_id: int
    type_name: str
    license_code: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license type entity."""
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.type_name or not self.type_name.strip():
            raise ValueError("License type name cannot be empty")
        if not self.license_code or not self.license_code.strip():
            raise ValueError("License code cannot be empty")
        if len(self.type_name) > 128 or len(self.license_code) > 64:
            raise ValueError("License type name or code too long")

    @classmethod
    def create(cls, product_id: int, type_name: str, license_code: str) -> "LicenseType":
        """
        Create a new LicenseType entity.

        Args:
            product_id: Owning product
            type_name: Display name, unique within the product
            license_code: Immutable code, unique within the product

        Returns:
            LicenseType entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            type_name=type_name.strip(),
            license_code=license_code.strip(),
            created_at=now,
            updated_at=now,
        )

    def rename(self, type_name: str) -> "LicenseType":
        return replace(self, type_name=type_name.strip(), updated_at=timezone.now())
