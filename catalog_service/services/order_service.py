import logging

from catalog_service.core.exceptions import NotFoundError
from catalog_service.domain.interfaces.repository_interface import OrderStoreInterface
from catalog_service.domain.models.order import Order

logger = logging.getLogger(__name__)


class OrderService:
    """Read access to persisted orders."""

    def __init__(self, orders: OrderStoreInterface):
        self.orders = orders

    def get_order(self, order_id: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            logger.info(f"Order {order_id} not found")
            raise NotFoundError("order ID", order_id)
        return order
