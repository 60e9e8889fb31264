"""
Django implementations of the version repository ports.
"""
from typing import Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from core.infrastructure.database import paginate
from versions.domain.version import FirmwareVersion, SoftwareVersion
from versions.infrastructure.models import FirmwareVersion as FirmwareVersionModel
from versions.infrastructure.models import SoftwareVersion as SoftwareVersionModel
from versions.ports.version_repository import (
    FirmwareVersionRepository,
    SoftwareVersionRepository,
)


class DjangoFirmwareVersionRepository(FirmwareVersionRepository):
    """Django ORM implementation of FirmwareVersionRepository."""

    def _to_domain(self, model: FirmwareVersionModel) -> FirmwareVersion:
        return FirmwareVersion(
            id=model.id,
            product_id=model.product_id,
            version=model.version,
            release_date=model.release_date,
            remark=model.remark,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def save(self, firmware: FirmwareVersion) -> FirmwareVersion:
        if firmware.id is None:
            model = FirmwareVersionModel.objects.create(
                product_id=firmware.product_id,
                version=firmware.version,
                release_date=firmware.release_date,
                remark=firmware.remark,
                created_by=firmware.created_by,
                created_at=firmware.created_at,
                updated_at=firmware.updated_at,
            )
            return self._to_domain(model)

        FirmwareVersionModel.objects.filter(id=firmware.id).update(
            version=firmware.version,
            release_date=firmware.release_date,
            remark=firmware.remark,
            updated_at=firmware.updated_at,
        )
        return firmware

    def find_by_id(self, firmware_id: int) -> Optional[FirmwareVersion]:
        try:
            return self._to_domain(FirmwareVersionModel.objects.get(id=firmware_id))
        except FirmwareVersionModel.DoesNotExist:
            return None

    def find_many(self, firmware_ids: Iterable[int]) -> List[FirmwareVersion]:
        models = FirmwareVersionModel.objects.filter(id__in=list(firmware_ids)).order_by("id")
        return [self._to_domain(model) for model in models]

    def version_exists(
        self, product_id: int, version: str, exclude_id: Optional[int] = None
    ) -> bool:
        queryset = FirmwareVersionModel.objects.filter(product_id=product_id, version=version)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def delete(self, firmware_id: int) -> None:
        model = FirmwareVersionModel.objects.get(id=firmware_id)
        model.software_versions.clear()
        model.delete()

    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[FirmwareVersion]]:
        queryset = FirmwareVersionModel.objects.filter(product_id=product_id).order_by(
            "-release_date", "-id"
        )
        total, models = paginate(queryset, page_request)
        return total, [self._to_domain(model) for model in models]


class DjangoSoftwareVersionRepository(SoftwareVersionRepository):
    """Django ORM implementation of SoftwareVersionRepository."""

    def _to_domain(self, model: SoftwareVersionModel) -> SoftwareVersion:
        return SoftwareVersion(
            id=model.id,
            product_id=model.product_id,
            version=model.version,
            release_date=model.release_date,
            update_log=model.update_log,
            remark=model.remark,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
            feature_ids=tuple(sorted(feature.id for feature in model.features.all())),
            firmware_version_ids=tuple(
                sorted(firmware.id for firmware in model.firmware_versions.all())
            ),
        )

    def save(self, software: SoftwareVersion) -> SoftwareVersion:
        if software.id is None:
            model = SoftwareVersionModel.objects.create(
                product_id=software.product_id,
                version=software.version,
                release_date=software.release_date,
                update_log=software.update_log,
                remark=software.remark,
                created_by=software.created_by,
                created_at=software.created_at,
                updated_at=software.updated_at,
            )
        else:
            model = SoftwareVersionModel.objects.get(id=software.id)
            model.version = software.version
            model.release_date = software.release_date
            model.update_log = software.update_log
            model.remark = software.remark
            model.updated_at = software.updated_at
            model.save()

        model.features.clear()
        model.features.add(*software.feature_ids)
        model.firmware_versions.clear()
        model.firmware_versions.add(*software.firmware_version_ids)
        return self._to_domain(model)

    def find_by_id(self, software_id: int) -> Optional[SoftwareVersion]:
        try:
            return self._to_domain(SoftwareVersionModel.objects.get(id=software_id))
        except SoftwareVersionModel.DoesNotExist:
            return None

    def version_exists(
        self, product_id: int, version: str, exclude_id: Optional[int] = None
    ) -> bool:
        queryset = SoftwareVersionModel.objects.filter(product_id=product_id, version=version)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def delete(self, software_id: int) -> None:
        model = SoftwareVersionModel.objects.get(id=software_id)
        model.features.clear()
        model.firmware_versions.clear()
        model.delete()

    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[SoftwareVersion]]:
        queryset = (
            SoftwareVersionModel.objects.filter(product_id=product_id)
            .prefetch_related("features", "firmware_versions")
            .order_by("-release_date", "-id")
        )
        total, models = paginate(queryset, page_request)
        return total, [self._to_domain(model) for model in models]
