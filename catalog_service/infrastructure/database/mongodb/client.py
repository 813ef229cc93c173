from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
import time

from bson.errors import InvalidDocument
from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    PyMongoError,
    WTimeoutError,
)

from catalog_service.core.exceptions import RepositoryError, StoreUnavailableError
from catalog_service.core.logging import get_logger, log_data
from catalog_service.infrastructure.database.connection import DatabaseConnection

logger = get_logger(__name__)

# ConnectionFailure covers AutoReconnect, NetworkTimeout and
# ServerSelectionTimeoutError.
UNAVAILABLE_ERRORS = (ConnectionFailure, ExecutionTimeout, WTimeoutError)


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """
    Map pymongo errors raised inside the block onto the service error types.

    Connectivity failures and timeouts become ``StoreUnavailableError``. Any
    other driver error except ``DuplicateKeyError`` becomes
    ``RepositoryError``, as do documents BSON cannot encode (integers wider
    than 64 bits among them).
    """
    try:
        yield
    except UNAVAILABLE_ERRORS as e:
        logger.error(f"MongoDB unavailable during {operation}: {str(e)}")
        raise StoreUnavailableError(original_exception=e)
    except DuplicateKeyError:
        # Unique-constraint violations are domain errors; callers map them.
        raise
    except (PyMongoError, InvalidDocument, OverflowError) as e:
        logger.error(f"MongoDB error during {operation}: {str(e)}")
        raise RepositoryError(
            detail=f"Failed to {operation}",
            original_exception=e
        )


class MongoDBClient(DatabaseConnection[MongoClient, ClientSession]):
    """
    MongoDB client implementation.

    Wraps a single ``MongoClient``, whose internal pool is bounded by
    ``pool_size``. Every network call made through it is bounded by
    ``timeout_ms``.
    """

    def __init__(
        self,
        connection_uri: str,
        database_name: str,
        pool_size: int = 10,
        timeout_ms: int = 5000,
        **kwargs
    ):
        """
        Initialize MongoDB client settings. No connection is opened yet.

        Args:
            connection_uri: MongoDB connection URI
            database_name: Name of the database to use
            pool_size: Maximum size of the connection pool
            timeout_ms: Connect, server selection and socket timeout (ms)
            **kwargs: Additional ``MongoClient`` options
        """
        connection_options = {
            "maxPoolSize": pool_size,
            "connectTimeoutMS": timeout_ms,
            "serverSelectionTimeoutMS": timeout_ms,
            "socketTimeoutMS": timeout_ms,
            "retryWrites": True,
            "tz_aware": True,
            **kwargs
        }
        super().__init__(
            connection_uri=connection_uri,
            database_name=database_name,
            pool_size=pool_size,
            timeout_ms=timeout_ms,
            connection_options=connection_options
        )
        self._client: Optional[MongoClient] = None

    def connect(self) -> None:
        try:
            self._client = MongoClient(self.connection_uri, **self.connection_options)
            self.increment_stat("connections_created")
            self._client.admin.command("ping")
            self.stats["last_successful_connection"] = time.time()
            logger.info(
                "Successfully connected to MongoDB",
                extra=log_data(database_name=self.database_name, pool_size=self.pool_size)
            )
        except (ConnectionFailure, ConfigurationError) as e:
            logger.error(f"Failed to connect to MongoDB: {str(e)}")
            self.record_connection_error(e)
            raise StoreUnavailableError(original_exception=e)

    def get_connection(self) -> MongoClient:
        if self._client is None:
            self.connect()
        return self._client

    def get_database(self) -> Database:
        return self.get_connection()[self.database_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.get_database()[collection_name]

    def start_session(self) -> ClientSession:
        with translate_errors("start session"):
            return self.get_connection().start_session()

    def end_session(self, session: ClientSession) -> None:
        try:
            session.end_session()
        except PyMongoError as e:
            logger.warning(f"Error ending MongoDB session: {str(e)}")

    def create_indexes(self, collection_name: str, indexes: List[Dict[str, Any]]) -> List[str]:
        """
        Create indexes for a MongoDB collection.

        Args:
            collection_name: Name of the collection
            indexes: List of index specifications with ``key`` plus options

        Returns:
            List of created index names
        """
        names = []
        with translate_errors(f"create indexes on {collection_name}"):
            collection = self.get_collection(collection_name)
            for definition in indexes:
                options = {k: v for k, v in definition.items() if k != "key"}
                names.append(collection.create_index(list(definition["key"].items()), **options))
        logger.info(
            f"Created indexes for collection {collection_name}",
            extra=log_data(index_count=len(names))
        )
        return names

    def health_check(self) -> Dict[str, Any]:
        """
        Check MongoDB health status.

        Returns:
            Dictionary containing health check results
        """
        try:
            start_time = time.time()
            server_info = self.get_connection().server_info()
            response_time = time.time() - start_time

            return {
                "status": "ok",
                "response_time_ms": round(response_time * 1000, 2),
                "version": server_info.get("version", "unknown"),
                "connection_pool": {
                    "pool_size": self.pool_size,
                    "timeout_ms": self.timeout_ms
                },
                "stats": self.get_stats()
            }
        except (PyMongoError, StoreUnavailableError) as e:
            logger.error(f"MongoDB health check failed: {str(e)}")
            return {
                "status": "error",
                "error": str(e),
                "stats": self.get_stats()
            }

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self.increment_stat("connections_closed")
            logger.debug("Closed MongoDB client connection")
