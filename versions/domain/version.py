"""
Firmware and software version domain entities.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional, Tuple

from django.utils import timezone


def _validate_version(version: str) -> None:
    if not version or not version.strip():
        raise ValueError("Version cannot be empty")
    if len(version) > 64:
        raise ValueError("Version too long")


@dataclass(frozen=True)
class FirmwareVersion:
    """FirmwareVersion domain entity; ``version`` is unique per product."""

    id: Optional[int]
    product_id: int
    version: str
    release_date: datetime
    remark: str
    created_by: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate firmware version."""
        _validate_version(self.version)

    @classmethod
    def create(
        cls, product_id: int, version: str, release_date: datetime, remark: str, created_by: int
    ) -> "FirmwareVersion":
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            version=version.strip(),
            release_date=release_date,
            remark=remark or "",
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

    def with_changes(
        self,
        version: Optional[str] = None,
        release_date: Optional[datetime] = None,
        remark: Optional[str] = None,
    ) -> "FirmwareVersion":
        """Copy with the given fields; returns self when nothing differs."""
        changes = {}
        if version is not None and version.strip() != self.version:
            changes["version"] = version.strip()
        if release_date is not None and release_date != self.release_date:
            changes["release_date"] = release_date
        if remark is not None and remark != self.remark:
            changes["remark"] = remark
        if not changes:
            return self
        return replace(self, updated_at=timezone.now(), **changes)


@dataclass(frozen=True)
class SoftwareVersion:
    """
    SoftwareVersion domain entity.

    ``feature_ids`` and ``firmware_version_ids`` are the complete associated
    sets, held sorted.
    """

    id: Optional[int]
    product_id: int
    version: str
    release_date: datetime
    update_log: str
    remark: str
    created_by: int
    created_at: datetime
    updated_at: datetime
    feature_ids: Tuple[int, ...] = ()
    firmware_version_ids: Tuple[int, ...] = ()

    def __post_init__(self):
        """Validate software version."""
        _validate_version(self.version)

    @classmethod
    def create(
        cls,
        product_id: int,
        version: str,
        release_date: datetime,
        created_by: int,
        update_log: str = "",
        remark: str = "",
        feature_ids: Iterable[int] = (),
        firmware_version_ids: Iterable[int] = (),
    ) -> "SoftwareVersion":
        now = timezone.now()
        return cls(
            id=None,
            product_id=product_id,
            version=version.strip(),
            release_date=release_date,
            update_log=update_log or "",
            remark=remark or "",
            created_by=created_by,
            created_at=now,
            updated_at=now,
            feature_ids=tuple(sorted(set(feature_ids))),
            firmware_version_ids=tuple(sorted(set(firmware_version_ids))),
        )

    def with_changes(
        self,
        version: Optional[str] = None,
        release_date: Optional[datetime] = None,
        update_log: Optional[str] = None,
        remark: Optional[str] = None,
        feature_ids: Optional[Iterable[int]] = None,
        firmware_version_ids: Optional[Iterable[int]] = None,
    ) -> "SoftwareVersion":
        """Copy with the given fields; returns self when nothing differs."""
        changes = {}
        if version is not None and version.strip() != self.version:
            changes["version"] = version.strip()
        if release_date is not None and release_date != self.release_date:
            changes["release_date"] = release_date
        if update_log is not None and update_log != self.update_log:
            changes["update_log"] = update_log
        if remark is not None and remark != self.remark:
            changes["remark"] = remark
        if feature_ids is not None:
            ids = tuple(sorted(set(feature_ids)))
            if ids != self.feature_ids:
                changes["feature_ids"] = ids
        if firmware_version_ids is not None:
            ids = tuple(sorted(set(firmware_version_ids)))
            if ids != self.firmware_version_ids:
                changes["firmware_version_ids"] = ids
        if not changes:
            return self
        return replace(self, updated_at=timezone.now(), **changes)
