"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from typing import Iterable, List

from core.domain.exceptions import FeatureNotFoundError, InvalidInputError
from licenses.domain.product_feature import ProductFeature


class FeatureSetValidator:
    """Checks a requested feature set against the owning product."""

    @staticmethod
    def validate(
        product_id: int, requested_ids: Iterable[int], found: List[ProductFeature]
    ) -> List[int]:
        """
        Validate requested feature ids.

        Args:
            product_id: Product the features must belong to
            requested_ids: Ids from the request, duplicates allowed
            found: Features loaded for those ids

        Returns:
            De-duplicated ids in request order

        Raises:
            FeatureNotFoundError: If an id does not exist
            InvalidInputError: If a feature belongs to another product
        """
        unique_ids = list(dict.fromkeys(requested_ids))
        by_id = {feature.id: feature for feature in found}
        missing = [feature_id for feature_id in unique_ids if feature_id not in by_id]
        if missing:
            raise FeatureNotFoundError()
        if any(by_id[feature_id].product_id != product_id for feature_id in unique_ids):
            raise InvalidInputError("Features must belong to the same product")
        return unique_ids
