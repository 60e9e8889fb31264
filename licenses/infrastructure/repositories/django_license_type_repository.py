"""
Django implementation of LicenseTypeRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from core.infrastructure.database import paginate
from licenses.domain.license_type import LicenseType
from licenses.infrastructure.models import LicenseType as LicenseTypeModel
from licenses.infrastructure.models import LicenseTypeFeature
from licenses.ports.license_type_repository import LicenseTypeRepository


class DjangoLicenseTypeRepository(LicenseTypeRepository):
    """Django ORM implementation of LicenseTypeRepository."""

    def _to_domain(self, model: LicenseTypeModel) -> LicenseType:
        return LicenseType(
            id=model.id,
            product_id=model.product_id,
            type_name=model.type_name,
            license_code=model.license_code,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def save(self, license_type: LicenseType) -> LicenseType:
        if license_type.id is None:
            model = LicenseTypeModel.objects.create(
                product_id=license_type.product_id,
                type_name=license_type.type_name,
                license_code=license_type.license_code,
                created_at=license_type.created_at,
                updated_at=license_type.updated_at,
            )
            return self._to_domain(model)

        # license_code is never written after creation
        LicenseTypeModel.objects.filter(id=license_type.id).update(
            type_name=license_type.type_name,
            updated_at=license_type.updated_at,
        )
        return license_type

    def find_by_id(self, license_type_id: int) -> Optional[LicenseType]:
        try:
            return self._to_domain(LicenseTypeModel.objects.get(id=license_type_id))
        except LicenseTypeModel.DoesNotExist:
            return None

    def type_name_exists(
        self, product_id: int, type_name: str, exclude_id: Optional[int] = None
    ) -> bool:
        queryset = LicenseTypeModel.objects.filter(product_id=product_id, type_name=type_name)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def license_code_exists(self, product_id: int, license_code: str) -> bool:
        return LicenseTypeModel.objects.filter(
            product_id=product_id, license_code=license_code
        ).exists()

    def device_count(self, license_type_id: int) -> int:
        return LicenseTypeModel.objects.get(id=license_type_id).devices.count()

    def delete(self, license_type_id: int) -> None:
        LicenseTypeModel.objects.filter(id=license_type_id).delete()

    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[LicenseType]]:
        queryset = LicenseTypeModel.objects.filter(product_id=product_id).order_by("id")
        total, models = paginate(queryset, page_request)
        return total, [self._to_domain(model) for model in models]

    def find_many(self, license_type_ids: Iterable[int]) -> Dict[int, LicenseType]:
        models = LicenseTypeModel.objects.filter(id__in=list(license_type_ids))
        return {model.id: self._to_domain(model) for model in models}

    def feature_ids(self, license_type_id: int) -> List[int]:
        return list(
            LicenseTypeFeature.objects.filter(license_type_id=license_type_id)
            .order_by("feature_id")
            .values_list("feature_id", flat=True)
        )

    def feature_codes(self, license_type_id: int) -> List[str]:
        return list(
            LicenseTypeFeature.objects.filter(license_type_id=license_type_id)
            .order_by("feature_id")
            .values_list("feature__feature_code", flat=True)
        )

    def replace_features(self, license_type_id: int, feature_ids: Iterable[int]) -> None:
        self.clear_features(license_type_id)
        LicenseTypeFeature.objects.bulk_create(
            [
                LicenseTypeFeature(license_type_id=license_type_id, feature_id=feature_id)
                for feature_id in feature_ids
            ]
        )

    def clear_features(self, license_type_id: int) -> None:
        LicenseTypeFeature.objects.filter(license_type_id=license_type_id).delete()
