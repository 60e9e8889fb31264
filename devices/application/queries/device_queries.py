"""
Device queries.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import Actor


@dataclass
class ListDevicesQuery:
    """
    Devices the actor may read, newest first.

    ``sn`` and ``oem_tag`` match case-insensitive substrings.
    """

    actor: Actor
    product_id: Optional[int] = None
    license_type_id: Optional[int] = None
    sn: str = ""
    oem_tag: str = ""
    page: int = 1
    page_size: int = 10


@dataclass
class GetDeviceBySNQuery:
    actor: Actor
    sn: str


@dataclass
class ListDeviceProductsQuery:
    """Readable products with their device counts."""

    actor: Actor
    page: int = 1
    page_size: int = 10


@dataclass
class IssueActivationArtifactQuery:
    actor: Actor
    sn: str
