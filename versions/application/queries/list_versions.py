"""
Version listing queries.
"""
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class ListVersionsQuery:
    """Firmware or software versions of a product, newest release first."""

    actor: Actor
    product_id: int
    page: int = 1
    page_size: int = 10
