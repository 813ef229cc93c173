from typing import Iterator

from fastapi import Depends, Request
from pymongo.client_session import ClientSession

from catalog_service.core.config import Settings, get_settings
from catalog_service.core.logging import get_logger
from catalog_service.infrastructure.database.mongodb.client import MongoDBClient
from catalog_service.infrastructure.repositories import OrderRepository, ProductRepository
from catalog_service.services import OrderReconciler, OrderService, ProductService

logger = get_logger(__name__)


def get_db_client(request: Request) -> MongoDBClient:
    """
    Provide the application-wide MongoDB client created at startup.

    Args:
        request: Incoming request

    Returns:
        MongoDBClient: Shared client owning the connection pool
    """
    return request.app.state.db_client


def get_db_session(db_client: MongoDBClient = Depends(get_db_client)) -> Iterator[ClientSession]:
    """
    Acquire a database session for the duration of one request.

    The session is ended when the request finishes, whether it succeeded
    or raised.
    """
    with db_client.session() as session:
        yield session


def get_product_repository(
    db_client: MongoDBClient = Depends(get_db_client),
    session: ClientSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings)
) -> ProductRepository:
    return ProductRepository(db_client, settings.PRODUCTS_COLLECTION, session)


def get_order_repository(
    db_client: MongoDBClient = Depends(get_db_client),
    session: ClientSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings)
) -> OrderRepository:
    return OrderRepository(db_client, settings.ORDERS_COLLECTION, session)


def get_product_service(
    products: ProductRepository = Depends(get_product_repository)
) -> ProductService:
    return ProductService(products)


def get_order_service(
    orders: OrderRepository = Depends(get_order_repository)
) -> OrderService:
    return OrderService(orders)


def get_order_reconciler(
    products: ProductRepository = Depends(get_product_repository),
    orders: OrderRepository = Depends(get_order_repository)
) -> OrderReconciler:
    return OrderReconciler(products, orders)
