"""
Product repository port (interface).

This defines the contract for product persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from products.domain.product import Product


class ProductRepository(ABC):
    """
    Abstract repository for Product entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, product: Product) -> Product:
        """
        Insert a new product (id None) or update an existing one.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        pass

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        pass

    @abstractmethod
    def name_exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def dependents(self, product_id: int) -> Dict[str, int]:
        """
        Count entities that block deletion of a product.

        Returns:
            Mapping of relation name to count, only non-zero entries
        """
        pass

    @abstractmethod
    def delete(self, product_id: int) -> None:
        pass

    @abstractmethod
    def list(
        self, product_ids: Optional[Iterable[int]], page_request: PageRequest
    ) -> Tuple[int, List[Product]]:
        """
        List products, newest first.

        Args:
            product_ids: Restrict to these ids; None lists every product
            page_request: Page to return

        Returns:
            Total count and the products of the page
        """
        pass

    @abstractmethod
    def names_by_id(self, product_ids: Iterable[int]) -> Dict[int, str]:
        pass
