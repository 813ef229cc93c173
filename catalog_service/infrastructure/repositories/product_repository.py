from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from catalog_service.core.exceptions import DuplicateEntityError
from catalog_service.core.logging import get_logger, log_data
from catalog_service.domain.interfaces.repository_interface import ProductStoreInterface
from catalog_service.domain.models.product import Product
from catalog_service.infrastructure.database.mongodb.client import MongoDBClient, translate_errors
from catalog_service.infrastructure.repositories.base import MongoRepository, to_object_id

logger = get_logger(__name__)


class ProductRepository(MongoRepository, ProductStoreInterface):
    """
    Repository for catalog products stored in MongoDB.

    Products are stored as ``{_id, name, description, price, inventory}``.
    """

    collection_name = "products"

    INDEXES = [
        {
            "key": {"name": 1},
            "name": "product_name_unique",
            "unique": True
        },
    ]

    @classmethod
    def ensure_indexes(cls, db_client: MongoDBClient, collection_name: Optional[str] = None) -> None:
        db_client.create_indexes(collection_name or cls.collection_name, cls.INDEXES)

    def _map_to_model(self, document: Dict[str, Any]) -> Product:
        return Product(
            id=str(document["_id"]),
            name=document.get("name", ""),
            description=document.get("description", ""),
            price=document.get("price", 0),
            inventory=document.get("inventory", 0)
        )

    def _map_to_document(self, product: Product) -> Dict[str, Any]:
        return {
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "inventory": product.inventory
        }

    def find_by_id(self, product_id: str) -> Optional[Product]:
        object_id = to_object_id(product_id)
        if object_id is None:
            logger.debug(f"Malformed product ID: {product_id}")
            return None

        with translate_errors("retrieve product"):
            document = self.collection.find_one({"_id": object_id}, session=self.session)

        if not document:
            return None
        return self._map_to_model(document)

    def find_by_name(self, name: str) -> Optional[Product]:
        with translate_errors("retrieve product"):
            document = self.collection.find_one({"name": name}, session=self.session)

        if not document:
            return None
        return self._map_to_model(document)

    def adjust_inventory(self, product_id: str, expected: int, updated: int) -> int:
        """
        Conditionally set inventory, filtering on the value previously read.

        A modified count of 0 means the document changed since it was read,
        disappeared, or ``updated`` equals ``expected``.
        """
        object_id = to_object_id(product_id)
        if object_id is None:
            return 0

        with translate_errors("update inventory"):
            result = self.collection.update_one(
                {"_id": object_id, "inventory": expected},
                {"$set": {"inventory": updated}},
                session=self.session
            )

        logger.debug(
            f"Inventory update for product {product_id}",
            extra=log_data(expected=expected, updated=updated, modified=result.modified_count)
        )
        return result.modified_count

    def create(self, product: Product) -> Product:
        document = self._map_to_document(product)
        try:
            with translate_errors("create product"):
                result = self.collection.insert_one(document, session=self.session)
        except DuplicateKeyError:
            logger.warning(f"Duplicate product name: {product.name}")
            raise DuplicateEntityError(
                detail=f"A product named {product.name} already exists.",
                context={"name": product.name}
            )

        logger.info(f"Created product {result.inserted_id}", extra=log_data(name=product.name))
        document["_id"] = result.inserted_id
        return self._map_to_model(document)

    def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        object_id = to_object_id(product_id)
        if object_id is None:
            return None

        try:
            with translate_errors("update product"):
                document = self.collection.find_one_and_update(
                    {"_id": object_id},
                    {"$set": data},
                    return_document=ReturnDocument.AFTER,
                    session=self.session
                )
        except DuplicateKeyError:
            raise DuplicateEntityError(
                detail=f"A product named {data.get('name')} already exists.",
                context={"name": data.get("name")}
            )

        if not document:
            return None
        logger.info(f"Updated product {product_id}", extra=log_data(fields=sorted(data)))
        return self._map_to_model(document)

    def delete(self, product_id: str) -> bool:
        object_id = to_object_id(product_id)
        if object_id is None:
            return False

        with translate_errors("delete product"):
            result = self.collection.delete_one({"_id": object_id}, session=self.session)

        if result.deleted_count:
            logger.info(f"Deleted product {product_id}")
        return result.deleted_count > 0

    def list(self, skip: int = 0, limit: int = 100) -> List[Product]:
        with translate_errors("list products"):
            cursor = self.collection.find({}, session=self.session).sort("name", 1).skip(skip).limit(limit)
            return [self._map_to_model(document) for document in cursor]

    def count(self) -> int:
        with translate_errors("count products"):
            return self.collection.count_documents({}, session=self.session)
