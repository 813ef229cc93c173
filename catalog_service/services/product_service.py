import logging
from typing import Any, Dict, List

from catalog_service.core.exceptions import InvalidInputError, NotFoundError
from catalog_service.domain.interfaces.repository_interface import ProductStoreInterface
from catalog_service.domain.models.product import Product
from catalog_service.domain.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Manages catalog product records."""

    def __init__(self, products: ProductStoreInterface):
        self.products = products

    def create_product(self, data: ProductCreate) -> Product:
        """Creates a product."""
        logger.info(f"Creating product {data.name}")
        return self.products.create(Product(**data.model_dump()))

    def get_product(self, product_id: str) -> Product:
        """Gets product by ID."""
        product = self.products.find_by_id(product_id)
        if product is None:
            logger.info(f"Product {product_id} not found")
            raise NotFoundError("product ID", product_id)
        return product

    def get_product_by_name(self, name: str) -> Product:
        """Gets product by name."""
        product = self.products.find_by_name(name)
        if product is None:
            logger.info(f"Product named {name} not found")
            raise NotFoundError("product name", name)
        return product

    def list_products(self, limit: int = 50, offset: int = 0) -> List[Product]:
        return self.products.list(skip=offset, limit=limit)

    def count_products(self) -> int:
        return self.products.count()

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        """Updates the provided fields of a product."""
        fields = data.model_dump(exclude_none=True)
        if not fields:
            raise InvalidInputError("No fields to update")

        product = self.products.update(product_id, fields)
        if product is None:
            raise NotFoundError("product ID", product_id)
        return product

    def delete_product(self, product_id: str) -> None:
        if not self.products.delete(product_id):
            raise NotFoundError("product ID", product_id)

    def format_product_data(self, product: Product) -> Dict[str, Any]:
        """Formats product for response."""
        return product.to_dict()
