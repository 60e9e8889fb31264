"""
Version repository ports (interfaces).

This defines the contract for firmware and software version persistence.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from versions.domain.version import FirmwareVersion, SoftwareVersion


class FirmwareVersionRepository(ABC):
    """Abstract repository for FirmwareVersion entities."""

    @abstractmethod
    def save(self, firmware: FirmwareVersion) -> FirmwareVersion:
        pass

    @abstractmethod
    def find_by_id(self, firmware_id: int) -> Optional[FirmwareVersion]:
        pass

    @abstractmethod
    def find_many(self, firmware_ids: Iterable[int]) -> List[FirmwareVersion]:
        pass

    @abstractmethod
    def version_exists(
        self, product_id: int, version: str, exclude_id: Optional[int] = None
    ) -> bool:
        pass

    @abstractmethod
    def delete(self, firmware_id: int) -> None:
        """Detach from software versions, then delete."""
        pass

    @abstractmethod
    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[FirmwareVersion]]:
        """Newest release first."""
        pass


class SoftwareVersionRepository(ABC):
    """Abstract repository for SoftwareVersion entities."""

    @abstractmethod
    def save(self, software: SoftwareVersion) -> SoftwareVersion:
        """
        Insert or update a software version.

        Both association sets are written replace-all: cleared, then
        re-inserted from the entity.
        """
        pass

    @abstractmethod
    def find_by_id(self, software_id: int) -> Optional[SoftwareVersion]:
        pass

    @abstractmethod
    def version_exists(
        self, product_id: int, version: str, exclude_id: Optional[int] = None
    ) -> bool:
        pass

    @abstractmethod
    def delete(self, software_id: int) -> None:
        pass

    @abstractmethod
    def list_for_product(
        self, product_id: int, page_request: PageRequest
    ) -> Tuple[int, List[SoftwareVersion]]:
        """Newest release first."""
        pass
