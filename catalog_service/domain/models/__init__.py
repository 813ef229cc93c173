"""
Domain models for the Catalog Service.

Domain models are persistence-agnostic and focus only on the business domain:
catalog products, orders and the outcome of reconciling an order against
inventory.
"""

from catalog_service.domain.models.order import (
    LineItem,
    Order,
    ReconciliationRequest,
    ReconciliationResult,
    UnfulfilledReason,
)
from catalog_service.domain.models.product import Product

__all__ = [
    "LineItem",
    "Order",
    "Product",
    "ReconciliationRequest",
    "ReconciliationResult",
    "UnfulfilledReason",
]
