"""
Product manager repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from products.domain.product_manager import ProductManager


class ProductManagerRepository(ABC):
    """Abstract repository for ProductManager entities."""

    @abstractmethod
    def find(self, product_id: int, user_id: int) -> Optional[ProductManager]:
        """
        Find the manager record binding a user to a product.

        Args:
            product_id: Product id
            user_id: User id

        Returns:
            ProductManager or None if the user does not manage the product
        """
        pass

    @abstractmethod
    def list_for_product(self, product_id: int, for_update: bool = False) -> List[ProductManager]:
        """
        All managers of a product, main first.

        Args:
            product_id: Product id
            for_update: Lock the rows until the transaction ends

        Returns:
            List of ProductManager entities
        """
        pass

    @abstractmethod
    def product_ids_for_user(self, user_id: int) -> List[int]:
        pass

    @abstractmethod
    def save(self, manager: ProductManager) -> ProductManager:
        pass

    @abstractmethod
    def delete(self, manager_id: int) -> None:
        pass

    @abstractmethod
    def delete_for_product(self, product_id: int) -> int:
        """Delete every manager of a product, returning the count removed."""
        pass
