from typing import Any, Dict, Optional

from catalog_service.core.logging import get_logger, log_data
from catalog_service.domain.interfaces.repository_interface import OrderStoreInterface
from catalog_service.domain.models.order import LineItem, Order
from catalog_service.infrastructure.database.mongodb.client import translate_errors
from catalog_service.infrastructure.repositories.base import MongoRepository, to_object_id

logger = get_logger(__name__)


class OrderRepository(MongoRepository, OrderStoreInterface):
    """
    Repository for orders stored in MongoDB.

    Orders are stored as ``{isOutgoing, orderDetails: [{productId: qty}], datetime}``.
    """

    collection_name = "orders"

    def _map_to_document(self, order: Order) -> Dict[str, Any]:
        return {
            "isOutgoing": order.is_outgoing,
            "orderDetails": [item.to_dict() for item in order.line_items],
            "datetime": order.created_at
        }

    def _map_to_model(self, document: Dict[str, Any]) -> Order:
        line_items = [
            LineItem(product_id=product_id, quantity=quantity)
            for detail in document.get("orderDetails", [])
            for product_id, quantity in detail.items()
        ]
        return Order(
            id=str(document["_id"]),
            is_outgoing=document["isOutgoing"],
            line_items=line_items,
            created_at=document["datetime"]
        )

    def insert(self, order: Order) -> str:
        document = self._map_to_document(order)
        with translate_errors("create order"):
            result = self.collection.insert_one(document, session=self.session)

        order_id = str(result.inserted_id)
        logger.info(
            f"Created order {order_id}",
            extra=log_data(is_outgoing=order.is_outgoing, line_items=len(order.line_items))
        )
        return order_id

    def find_by_id(self, order_id: str) -> Optional[Order]:
        object_id = to_object_id(order_id)
        if object_id is None:
            return None

        with translate_errors("retrieve order"):
            document = self.collection.find_one({"_id": object_id}, session=self.session)

        if not document:
            return None
        return self._map_to_model(document)
