"""
Product commands.

Commands to create, modify and delete products.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from core.domain.value_objects import Actor, ManagerPermission


@dataclass
class AddProductCommand:
    """Create a product; the actor becomes its main manager."""

    actor: Actor
    code: str
    name: str
    product_type: str = ""


@dataclass
class ManagerUpdate:
    """Permission/remark change for one existing manager."""

    user_id: int
    permission: Optional[ManagerPermission] = None
    remark: Optional[str] = None


@dataclass
class ModifyProductCommand:
    """
    Rename/retype a product, transfer the main role and update assistants.

    All changes are applied in one transaction.
    """

    actor: Actor
    product_id: int
    name: Optional[str] = None
    product_type: Optional[str] = None
    main_user_id: Optional[int] = None
    managers: List[ManagerUpdate] = field(default_factory=list)


@dataclass
class DeleteProductCommand:
    """Delete a product that has no remaining dependents."""

    actor: Actor
    product_id: int
