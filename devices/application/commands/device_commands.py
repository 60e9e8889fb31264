"""
Device commands.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from core.domain.value_objects import Actor


@dataclass
class AddDeviceCommand:
    actor: Actor
    product_id: int
    sn: str
    license_type_id: int
    oem_tag: str = ""
    remark: str = ""


@dataclass
class BatchAddDevicesCommand:
    """All-or-nothing registration of several serial numbers."""

    actor: Actor
    product_id: int
    license_type_id: int
    sns: List[str] = field(default_factory=list)
    oem_tag: str = ""
    remark: str = ""


@dataclass
class UpdateDeviceCommand:
    actor: Actor
    device_id: int
    license_type_id: int
    oem_tag: str = ""
    remark: str = ""


@dataclass
class DeleteDeviceCommand:
    actor: Actor
    device_id: int


@dataclass
class BatchUpdateLicenseTypeCommand:
    """
    Move devices, possibly of several products, to one license type.

    ``remark`` of None keeps each device's remark.
    """

    actor: Actor
    license_type_id: int
    device_ids: List[int] = field(default_factory=list)
    remark: Optional[str] = None
