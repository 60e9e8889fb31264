"""
License type and feature listing queries.
"""
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class ListLicenseTypesQuery:
    """License types of one product, each with its features."""

    actor: Actor
    product_id: int
    page: int = 1
    page_size: int = 10


@dataclass
class ListFeaturesQuery:
    """Features of one product."""

    actor: Actor
    product_id: int
    page: int = 1
    page_size: int = 10
