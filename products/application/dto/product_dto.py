"""
Product DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from products.domain.product import Product
from products.domain.product_manager import ProductManager


@dataclass
class ManagerDTO:
    """DTO for a product manager."""

    user_id: int
    role: str
    permission: str
    remark: str

    @classmethod
    def from_domain(cls, manager: ProductManager) -> "ManagerDTO":
        return cls(
            user_id=manager.user_id,
            role=manager.role.value,
            permission=manager.effective_permission.value,
            remark=manager.remark,
        )


@dataclass
class ProductDTO:
    """DTO for a product and its managers."""

    id: int
    code: str
    name: str
    product_type: str
    created_at: datetime
    updated_at: datetime
    managers: List[ManagerDTO] = field(default_factory=list)

    @classmethod
    def from_domain(cls, product: Product, managers: List[ProductManager]) -> "ProductDTO":
        return cls(
            id=product.id,
            code=product.code,
            name=product.name,
            product_type=product.product_type,
            created_at=product.created_at,
            updated_at=product.updated_at,
            managers=[ManagerDTO.from_domain(manager) for manager in managers],
        )
