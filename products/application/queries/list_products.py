"""
ListProductsQuery.
"""
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class ListProductsQuery:
    """Products the actor manages (every product for the super-admin)."""

    actor: Actor
    page: int = 1
    page_size: int = 10
