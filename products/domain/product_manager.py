"""
ProductManager domain entity.

A manager record binds a user to a product with a role and a stored
permission. Each product has exactly one main manager.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import ManagerPermission, ManagerRole


@dataclass(frozen=True)
class ProductManager:
    """ProductManager domain entity."""

    id: Optional[int]
    product_id: int
    user_id: int
    role: ManagerRole
    permission: ManagerPermission
    remark: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate manager entity."""
        if not self.user_id:
            raise ValueError("Manager must reference a user")
        if len(self.remark) > 255:
            raise ValueError("Manager remark too long")

    @classmethod
    def create_main(cls, product_id: int, user_id: int) -> "ProductManager":
        """Main manager record for the creator of a product."""
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            user_id=user_id,
            role=ManagerRole.MAIN,
            permission=ManagerPermission.FULL,
            remark="",
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_assistant(
        cls,
        product_id: int,
        user_id: int,
        permission: Optional[ManagerPermission] = None,
        remark: str = "",
    ) -> "ProductManager":
        """Assistant record; permission defaults to read."""
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            user_id=user_id,
            role=ManagerRole.ASSISTANT,
            permission=permission or ManagerPermission.default(),
            remark=remark or "",
            created_at=now,
            updated_at=now,
        )

    @property
    def is_main(self) -> bool:
        return self.role is ManagerRole.MAIN

    @property
    def effective_permission(self) -> ManagerPermission:
        """Main implies full regardless of the stored value."""
        if self.is_main:
            return ManagerPermission.FULL
        return self.permission

    def demote(self) -> "ProductManager":
        """Former main manager: assistant with the default permission."""
        return replace(
            self,
            role=ManagerRole.ASSISTANT,
            permission=ManagerPermission.default(),
            updated_at=timezone.now(),
        )

    def promote(self) -> "ProductManager":
        """New main manager: full permission, remark cleared."""
        return replace(
            self,
            role=ManagerRole.MAIN,
            permission=ManagerPermission.FULL,
            remark="",
            updated_at=timezone.now(),
        )

    def with_settings(
        self, permission: Optional[ManagerPermission] = None, remark: Optional[str] = None
    ) -> "ProductManager":
        return replace(
            self,
            permission=permission or self.permission,
            remark=self.remark if remark is None else remark,
            updated_at=timezone.now(),
        )
