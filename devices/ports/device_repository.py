"""
Device repository port (interface).

This defines the contract for device persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from devices.domain.device import Device


@dataclass(frozen=True)
class DeviceFilter:
    """Optional filters for device listings; None or empty means unfiltered."""

    product_id: Optional[int] = None
    license_type_id: Optional[int] = None
    # Case-insensitive substring matches
    sn: str = ""
    oem_tag: str = ""
    # Restricts results to these products when not None
    product_scope: Optional[Iterable[int]] = None


class DeviceRepository(ABC):
    """Abstract repository for Device entities."""

    @abstractmethod
    def save(self, device: Device) -> Device:
        """
        Insert or update a device.

        Args:
            device: Device entity; inserted when ``id`` is None

        Returns:
            The stored device with its id
        """
        pass

    @abstractmethod
    def find_by_id(self, device_id: int) -> Optional[Device]:
        pass

    @abstractmethod
    def find_many(self, device_ids: Iterable[int]) -> List[Device]:
        """Devices with these ids, ordered by id; unknown ids are skipped."""
        pass

    @abstractmethod
    def find_by_sn(self, sn: str) -> Optional[Device]:
        pass

    @abstractmethod
    def existing_sns(self, sns: Iterable[str]) -> List[str]:
        """Which of ``sns`` are already registered, on any product."""
        pass

    @abstractmethod
    def delete(self, device_id: int) -> None:
        pass

    @abstractmethod
    def list(
        self, filters: DeviceFilter, page_request: PageRequest
    ) -> Tuple[int, List[Device]]:
        """Filtered devices, newest first."""
        pass

    @abstractmethod
    def count_by_product(self, product_ids: Iterable[int]) -> Dict[int, int]:
        """Device count per product; products without devices map to 0."""
        pass
