"""
ProductFeature domain entity.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone


@dataclass(frozen=True)
class ProductFeature:
    """
    ProductFeature domain entity.

    ``feature_code`` is immutable and unique within its product, which is
    what makes it safe to embed in activation files.
    """

    id: Optional[int]
    product_id: int
    feature_name: str
    feature_code: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate feature entity."""
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.feature_name or not self.feature_name.strip():
            raise ValueError("Feature name cannot be empty")
        if not self.feature_code or not self.feature_code.strip():
            raise ValueError("Feature code cannot be empty")
        if len(self.feature_name) > 128 or len(self.feature_code) > 64:
            raise ValueError("Feature name or code too long")

    @classmethod
    def create(cls, product_id: int, feature_name: str, feature_code: str) -> "ProductFeature":
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            feature_name=feature_name.strip(),
            feature_code=feature_code.strip(),
            created_at=now,
            updated_at=now,
        )

    def rename(self, feature_name: str) -> "ProductFeature":
        return replace(self, feature_name=feature_name.strip(), updated_at=timezone.now())
