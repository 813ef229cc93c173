from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from catalog_service.domain.models.order import Order
from catalog_service.domain.models.product import Product


class ProductStoreInterface(ABC):
    """
    Storage abstraction for catalog products.

    The order reconciler only relies on ``find_by_id`` and
    ``adjust_inventory``; the remaining methods back the CRUD endpoints.
    Implementations must raise ``StoreUnavailableError`` when the backing
    store cannot be reached and ``RepositoryError`` for any other failure.
    """

    @abstractmethod
    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Retrieves a product by its ID.

        Args:
            product_id: The ID of the product to retrieve

        Returns:
            The product if found, None otherwise (including malformed IDs)
        """
        pass

    @abstractmethod
    def adjust_inventory(self, product_id: str, expected: int, updated: int) -> int:
        """
        Sets a product's inventory to ``updated`` only if it still equals ``expected``.

        Args:
            product_id: The ID of the product to update
            expected: Inventory value the caller read
            updated: New inventory value

        Returns:
            Number of documents modified (0 or 1)
        """
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Product]:
        pass

    @abstractmethod
    def create(self, product: Product) -> Product:
        """
        Creates a new product.

        Returns:
            The created product with its assigned ID

        Raises:
            DuplicateEntityError: If the product name is already taken
        """
        pass

    @abstractmethod
    def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        """
        Updates fields of an existing product.

        Returns:
            The updated product if found, None otherwise
        """
        pass

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """
        Deletes a product by its ID.

        Returns:
            True if the product was deleted, False if not found
        """
        pass

    @abstractmethod
    def list(self, skip: int = 0, limit: int = 100) -> List[Product]:
        pass

    @abstractmethod
    def count(self) -> int:
        """Returns the number of products in the catalog."""
        pass


class OrderStoreInterface(ABC):
    """Storage abstraction for orders. Orders are insert-only."""

    @abstractmethod
    def insert(self, order: Order) -> str:
        """
        Persists an order.

        Returns:
            The ID assigned to the order
        """
        pass

    @abstractmethod
    def find_by_id(self, order_id: str) -> Optional[Order]:
        pass
