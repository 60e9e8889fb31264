"""
Device domain entity.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import SerialNumber


@dataclass(frozen=True)
class Device:
    """
    Device domain entity.

    ``sn`` is the durable identity, unique across every product.
    ``license_type_id`` is the only entitlement field that may change.
    """

    id: Optional[int]
    sn: str
    product_id: int
    license_type_id: int
    oem_tag: str
    remark: str
    created_by: int
    created_at: datetime
    updated_by: int
    updated_at: datetime

    def __post_init__(self):
        """Validate device entity."""
        SerialNumber(self.sn)
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.license_type_id:
            raise ValueError("License type ID is required")
        if len(self.oem_tag) > 64:
            raise ValueError("OEM tag too long")
        if len(self.remark) > 255:
            raise ValueError("Remark too long")

    @classmethod
    def create(
        cls,
        sn: str,
        product_id: int,
        license_type_id: int,
        created_by: int,
        oem_tag: str = "",
        remark: str = "",
    ) -> "Device":
        """
        Create a new Device entity.

        Args:
            sn: Serial number, surrounding whitespace is trimmed
            product_id: Owning product
            license_type_id: License type within that product
            created_by: Acting user id
            oem_tag: Optional OEM label
            remark: Optional free text

        Returns:
            Device entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            sn=(sn or "").strip(),
            product_id=product_id,
            license_type_id=license_type_id,
            oem_tag=oem_tag or "",
            remark=remark or "",
            created_by=created_by,
            created_at=now,
            updated_by=created_by,
            updated_at=now,
        )

    def update(
        self, license_type_id: int, oem_tag: str, remark: str, updated_by: int
    ) -> "Device":
        return replace(
            self,
            license_type_id=license_type_id,
            oem_tag=oem_tag or "",
            remark=remark or "",
            updated_by=updated_by,
            updated_at=timezone.now(),
        )

    def reassign_license(
        self, license_type_id: int, updated_by: int, remark: Optional[str] = None
    ) -> "Device":
        """Move the device to another license type; None keeps the remark."""
        return replace(
            self,
            license_type_id=license_type_id,
            remark=self.remark if remark is None else remark,
            updated_by=updated_by,
            updated_at=timezone.now(),
        )
