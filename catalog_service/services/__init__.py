"""
Services package for the Catalog Service.

Services orchestrate application workflows on top of the store interfaces:
product CRUD, order lookup and order reconciliation.
"""

from catalog_service.services.order_reconciler import OrderReconciler
from catalog_service.services.order_service import OrderService
from catalog_service.services.product_service import ProductService

__all__ = ["OrderReconciler", "OrderService", "ProductService"]
