from catalog_service.infrastructure.repositories.order_repository import OrderRepository
from catalog_service.infrastructure.repositories.product_repository import ProductRepository

__all__ = ["OrderRepository", "ProductRepository"]
