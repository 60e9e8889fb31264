"""
License type repository port (interface).

This defines the contract for license type persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from licenses.domain.license_type import LicenseType


class LicenseTypeRepository(ABC):
    """Abstract repository for LicenseType entities and their feature sets."""

    @abstractmethod
    def save(self, license_type: LicenseType) -> LicenseType:
        """
        Insert a new license type (id None) or rename an existing one.

        Args:
            license_type: LicenseType entity to save

        Returns:
            Saved license type entity
        """
        pass

    @abstractmethod
    def find_by_id(self, license_type_id: int) -> Optional[LicenseType]:
        pass

    @abstractmethod
    def type_name_exists(
        self, product_id: int, type_name: str, exclude_id: Optional[int] = None
    ) -> bool:
        pass

    @abstractmethod
    def license_code_exists(self, product_id: int, license_code: str) -> bool:
        pass

    @abstractmethod
    def device_count(self, license_type_id: int) -> int:
        pass

    @abstractmethod
    def delete(self, license_type_id: int) -> None:
        pass

    @abstractmethod
    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[LicenseType]]:
        pass

    @abstractmethod
    def find_many(self, license_type_ids: Iterable[int]) -> Dict[int, LicenseType]:
        pass

    @abstractmethod
    def feature_ids(self, license_type_id: int) -> List[int]:
        """Associated feature ids, ascending."""
        pass

    @abstractmethod
    def feature_codes(self, license_type_id: int) -> List[str]:
        """Associated feature codes, ordered by feature id."""
        pass

    @abstractmethod
    def replace_features(self, license_type_id: int, feature_ids: Iterable[int]) -> None:
        """
        Replace the feature set: clear every association, then insert the new set.

        Args:
            license_type_id: License type id
            feature_ids: The complete new set
        """
        pass

    @abstractmethod
    def clear_features(self, license_type_id: int) -> None:
        pass
