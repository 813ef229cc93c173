from catalog_service.domain.interfaces.repository_interface import (
    OrderStoreInterface,
    ProductStoreInterface,
)

__all__ = ["OrderStoreInterface", "ProductStoreInterface"]
