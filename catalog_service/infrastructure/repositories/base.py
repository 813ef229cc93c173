from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.client_session import ClientSession
from pymongo.collection import Collection

from catalog_service.infrastructure.database.mongodb.client import MongoDBClient


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a hex string into an ObjectId, or None when it is malformed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoRepository:
    """Shared plumbing for repositories bound to one collection and one session."""

    collection_name: str = ""

    def __init__(
        self,
        db_client: MongoDBClient,
        collection_name: Optional[str] = None,
        session: Optional[ClientSession] = None
    ):
        """
        Args:
            db_client: MongoDB client instance
            collection_name: Overrides the repository's default collection
            session: Session scoping every operation of this repository
        """
        self.db_client = db_client
        self.session = session
        if collection_name:
            self.collection_name = collection_name

    @property
    def collection(self) -> Collection:
        return self.db_client.get_collection(self.collection_name)
