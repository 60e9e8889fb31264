"""
Django implementation of FeatureRepository port.
"""
from typing import Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from core.infrastructure.database import paginate
from licenses.domain.product_feature import ProductFeature
from licenses.infrastructure.models import LicenseTypeFeature
from licenses.infrastructure.models import ProductFeature as ProductFeatureModel
from licenses.ports.feature_repository import FeatureRepository


class DjangoFeatureRepository(FeatureRepository):
    """Django ORM implementation of FeatureRepository."""

    def _to_domain(self, model: ProductFeatureModel) -> ProductFeature:
        return ProductFeature(
            id=model.id,
            product_id=model.product_id,
            feature_name=model.feature_name,
            feature_code=model.feature_code,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def save(self, feature: ProductFeature) -> ProductFeature:
        if feature.id is None:
            model = ProductFeatureModel.objects.create(
                product_id=feature.product_id,
                feature_name=feature.feature_name,
                feature_code=feature.feature_code,
                created_at=feature.created_at,
                updated_at=feature.updated_at,
            )
            return self._to_domain(model)

        ProductFeatureModel.objects.filter(id=feature.id).update(
            feature_name=feature.feature_name,
            updated_at=feature.updated_at,
        )
        return feature

    def find_by_id(self, feature_id: int) -> Optional[ProductFeature]:
        try:
            return self._to_domain(ProductFeatureModel.objects.get(id=feature_id))
        except ProductFeatureModel.DoesNotExist:
            return None

    def find_many(self, feature_ids: Iterable[int]) -> List[ProductFeature]:
        models = ProductFeatureModel.objects.filter(id__in=list(feature_ids)).order_by("id")
        return [self._to_domain(model) for model in models]

    def feature_name_exists(
        self, product_id: int, feature_name: str, exclude_id: Optional[int] = None
    ) -> bool:
        queryset = ProductFeatureModel.objects.filter(
            product_id=product_id, feature_name=feature_name
        )
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def feature_code_exists(self, product_id: int, feature_code: str) -> bool:
        return ProductFeatureModel.objects.filter(
            product_id=product_id, feature_code=feature_code
        ).exists()

    def clear_associations(self, feature_id: int) -> None:
        LicenseTypeFeature.objects.filter(feature_id=feature_id).delete()
        ProductFeatureModel.objects.get(id=feature_id).software_versions.clear()

    def delete(self, feature_id: int) -> None:
        ProductFeatureModel.objects.filter(id=feature_id).delete()

    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[ProductFeature]]:
        queryset = ProductFeatureModel.objects.filter(product_id=product_id).order_by("id")
        total, models = paginate(queryset, page_request)
        return total, [self._to_domain(model) for model in models]
