"""
Product feature repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from licenses.domain.product_feature import ProductFeature


class FeatureRepository(ABC):
    """Abstract repository for ProductFeature entities."""

    @abstractmethod
    def save(self, feature: ProductFeature) -> ProductFeature:
        pass

    @abstractmethod
    def find_by_id(self, feature_id: int) -> Optional[ProductFeature]:
        pass

    @abstractmethod
    def find_many(self, feature_ids: Iterable[int]) -> List[ProductFeature]:
        """Features for the ids that exist, ascending by id."""
        pass

    @abstractmethod
    def feature_name_exists(
        self, product_id: int, feature_name: str, exclude_id: Optional[int] = None
    ) -> bool:
        pass

    @abstractmethod
    def feature_code_exists(self, product_id: int, feature_code: str) -> bool:
        pass

    @abstractmethod
    def clear_associations(self, feature_id: int) -> None:
        """Remove the feature from every license type and software version."""
        pass

    @abstractmethod
    def delete(self, feature_id: int) -> None:
        pass

    @abstractmethod
    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[ProductFeature]]:
        pass
