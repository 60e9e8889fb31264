"""
Version DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from versions.domain.version import FirmwareVersion, SoftwareVersion


@dataclass
class FirmwareVersionDTO:
    """DTO for a firmware version."""

    id: int
    product_id: int
    version: str
    release_date: datetime
    remark: str
    created_by: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, firmware: FirmwareVersion) -> "FirmwareVersionDTO":
        return cls(
            id=firmware.id,
            product_id=firmware.product_id,
            version=firmware.version,
            release_date=firmware.release_date,
            remark=firmware.remark,
            created_by=firmware.created_by,
            created_at=firmware.created_at,
            updated_at=firmware.updated_at,
        )


@dataclass
class SoftwareVersionDTO:
    """DTO for a software version with its associations."""

    id: int
    product_id: int
    version: str
    release_date: datetime
    update_log: str
    remark: str
    created_by: int
    created_at: datetime
    updated_at: datetime
    feature_ids: List[int] = field(default_factory=list)
    firmware_version_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_domain(cls, software: SoftwareVersion) -> "SoftwareVersionDTO":
        return cls(
            id=software.id,
            product_id=software.product_id,
            version=software.version,
            release_date=software.release_date,
            update_log=software.update_log,
            remark=software.remark,
            created_by=software.created_by,
            created_at=software.created_at,
            updated_at=software.updated_at,
            feature_ids=list(software.feature_ids),
            firmware_version_ids=list(software.firmware_version_ids),
        )
