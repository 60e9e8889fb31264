"""
Manager commands.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import Actor, ManagerPermission


@dataclass
class AddManagerCommand:
    """Add an assistant manager, resolved by email."""

    actor: Actor
    product_id: int
    email: str
    permission: Optional[ManagerPermission] = None
    remark: str = ""


@dataclass
class RemoveManagerCommand:
    """Remove an assistant manager; the main manager cannot be removed."""

    actor: Actor
    product_id: int
    user_id: int
