"""
Device DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from devices.domain.device import Device
from licenses.domain.license_type import LicenseType


@dataclass
class DeviceDTO:
    """DTO for a device, with its product and license type labels."""

    id: int
    sn: str
    product_id: int
    product_name: str
    license_type_id: int
    license_type_name: str
    license_code: str
    oem_tag: str
    remark: str
    created_by: int
    created_at: datetime
    updated_by: int
    updated_at: datetime

    @classmethod
    def from_domain(
        cls,
        device: Device,
        product_name: str = "",
        license_type: Optional[LicenseType] = None,
    ) -> "DeviceDTO":
        return cls(
            id=device.id,
            sn=device.sn,
            product_id=device.product_id,
            product_name=product_name,
            license_type_id=device.license_type_id,
            license_type_name=license_type.type_name if license_type else "",
            license_code=license_type.license_code if license_type else "",
            oem_tag=device.oem_tag,
            remark=device.remark,
            created_by=device.created_by,
            created_at=device.created_at,
            updated_by=device.updated_by,
            updated_at=device.updated_at,
        )


@dataclass
class DeviceProductSummaryDTO:
    product_id: int
    product_name: str
    count: int


@dataclass
class BatchResultDTO:
    """Outcome of an all-or-nothing batch."""

    count: int


@dataclass
class ActivationArtifactDTO:
    """Activation file bytes and the suggested download name."""

    sn: str
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"
