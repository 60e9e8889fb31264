"""
Firmware and software version commands.

For modify commands a None field means "leave unchanged".
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import Actor


@dataclass
class AddFirmwareVersionCommand:
    actor: Actor
    product_id: int
    version: str
    release_date: datetime
    remark: str = ""


@dataclass
class ModifyFirmwareVersionCommand:
    actor: Actor
    firmware_version_id: int
    version: Optional[str] = None
    release_date: Optional[datetime] = None
    remark: Optional[str] = None


@dataclass
class DeleteFirmwareVersionCommand:
    actor: Actor
    firmware_version_id: int


@dataclass
class AddSoftwareVersionCommand:
    actor: Actor
    product_id: int
    version: str
    release_date: datetime
    update_log: str = ""
    remark: str = ""
    feature_ids: List[int] = field(default_factory=list)
    firmware_version_ids: List[int] = field(default_factory=list)


@dataclass
class ModifySoftwareVersionCommand:
    actor: Actor
    software_version_id: int
    version: Optional[str] = None
    release_date: Optional[datetime] = None
    update_log: Optional[str] = None
    remark: Optional[str] = None
    feature_ids: Optional[List[int]] = None
    firmware_version_ids: Optional[List[int]] = None


@dataclass
class DeleteSoftwareVersionCommand:
    actor: Actor
    software_version_id: int
