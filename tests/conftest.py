"""
Pytest fixtures for Catalog Service tests.

The in-memory stores mimic the MongoDB repositories closely enough for the
reconciler: reads return snapshots, and a conditional inventory update that
would leave the value unchanged reports zero modified documents, as
MongoDB's ``$set`` does.
"""

import dataclasses
import itertools
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from catalog_service.api.dependencies import (
    get_db_client,
    get_order_repository,
    get_product_repository,
)
from catalog_service.core.exceptions import DuplicateEntityError
from catalog_service.domain.interfaces.repository_interface import (
    OrderStoreInterface,
    ProductStoreInterface,
)
from catalog_service.domain.models.order import Order
from catalog_service.domain.models.product import Product
from catalog_service.main import create_application


class InMemoryProductStore(ProductStoreInterface):
    """Dictionary-backed product store."""

    def __init__(self):
        self.products: Dict[str, Product] = {}
        self.adjust_calls: List[tuple] = []
        self._ids = itertools.count(1)

    def add(
        self,
        name: str,
        inventory: int = 0,
        price: float = 1.0,
        product_id: Optional[str] = None,
        description: str = ""
    ) -> Product:
        product = Product(
            id=product_id or f"p{next(self._ids)}",
            name=name,
            description=description,
            price=price,
            inventory=inventory
        )
        self.products[product.id] = product
        return dataclasses.replace(product)

    def inventory_of(self, product_id: str) -> int:
        return self.products[product_id].inventory

    def find_by_id(self, product_id: str) -> Optional[Product]:
        product = self.products.get(product_id)
        return dataclasses.replace(product) if product else None

    def find_by_name(self, name: str) -> Optional[Product]:
        for product in self.products.values():
            if product.name == name:
                return dataclasses.replace(product)
        return None

    def adjust_inventory(self, product_id: str, expected: int, updated: int) -> int:
        self.adjust_calls.append((product_id, expected, updated))
        product = self.products.get(product_id)
        if product is None or product.inventory != expected or expected == updated:
            return 0
        product.inventory = updated
        return 1

    def create(self, product: Product) -> Product:
        if self.find_by_name(product.name):
            raise DuplicateEntityError(detail=f"A product named {product.name} already exists.")
        return self.add(
            name=product.name,
            inventory=product.inventory,
            price=product.price,
            description=product.description
        )

    def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        product = self.products.get(product_id)
        if product is None:
            return None
        for key, value in data.items():
            setattr(product, key, value)
        return dataclasses.replace(product)

    def delete(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None

    def list(self, skip: int = 0, limit: int = 100) -> List[Product]:
        ordered = sorted(self.products.values(), key=lambda p: p.name)
        return [dataclasses.replace(p) for p in ordered[skip:skip + limit]]

    def count(self) -> int:
        return len(self.products)


class InMemoryOrderStore(OrderStoreInterface):
    """List-backed order store."""

    def __init__(self):
        self.orders: Dict[str, Order] = {}
        self._ids = itertools.count(1)

    def insert(self, order: Order) -> str:
        order_id = f"order-{next(self._ids)}"
        self.orders[order_id] = dataclasses.replace(order, id=order_id, line_items=list(order.line_items))
        return order_id

    def find_by_id(self, order_id: str) -> Optional[Order]:
        return self.orders.get(order_id)


@pytest.fixture
def product_store():
    return InMemoryProductStore()


@pytest.fixture
def order_store():
    return InMemoryOrderStore()


@pytest.fixture
def db_client():
    client = MagicMock()
    client.health_check.return_value = {"status": "ok", "version": "7.0.0"}
    return client


@pytest.fixture
def app(product_store, order_store, db_client):
    """Application wired to the in-memory stores."""
    application = create_application(db_client=db_client)
    application.dependency_overrides[get_db_client] = lambda: db_client
    application.dependency_overrides[get_product_repository] = lambda: product_store
    application.dependency_overrides[get_order_repository] = lambda: order_store
    return application


@pytest.fixture
def client(app):
    # No context manager: the lifespan (which dials MongoDB) is not run.
    return TestClient(app, raise_server_exceptions=False)
