from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar
import threading
import time

from catalog_service.core.logging import get_logger

logger = get_logger(__name__)

# Generic types for the driver client and its session
T = TypeVar('T')
S = TypeVar('S')


class DatabaseConnection(Generic[T, S], ABC):
    """
    Abstract database connection manager.

    Owns a driver client (and therefore its connection pool) for the lifetime
    of the application and hands out one session per unit of work. Nothing is
    contacted at construction time; ``connect`` must be called explicitly.
    """

    def __init__(
        self,
        connection_uri: str,
        database_name: str,
        pool_size: int = 10,
        timeout_ms: int = 5000,
        connection_options: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the database connection manager.

        Args:
            connection_uri: URI for database connection
            database_name: Name of the database to use
            pool_size: Maximum size of the connection pool
            timeout_ms: Bound applied to connect, server selection and socket I/O
            connection_options: Additional driver options
        """
        self.connection_uri = connection_uri
        self.database_name = database_name
        self.pool_size = pool_size
        self.timeout_ms = timeout_ms
        self.connection_options = connection_options or {}

        self._stats_lock = threading.Lock()
        self.stats = {
            "connections_created": 0,
            "connections_closed": 0,
            "sessions_started": 0,
            "sessions_ended": 0,
            "last_connection_error": None,
            "last_successful_connection": None
        }

    @abstractmethod
    def connect(self) -> None:
        """
        Create the driver client and verify the server is reachable.

        Raises:
            StoreUnavailableError: If the server cannot be reached
        """
        pass

    @abstractmethod
    def get_connection(self) -> T:
        """
        Get the driver client, connecting first if needed.

        Raises:
            StoreUnavailableError: If connection acquisition fails
        """
        pass

    @abstractmethod
    def start_session(self) -> S:
        pass

    @abstractmethod
    def end_session(self, session: S) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the client and its pool."""
        pass

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        pass

    @contextmanager
    def session(self) -> Iterator[S]:
        """
        Context manager scoping a session to one unit of work.

        The session is ended on every exit path, including errors raised by
        the body. Errors from the body propagate unchanged.
        """
        session = self.start_session()
        self.increment_stat("sessions_started")
        try:
            yield session
        finally:
            self.end_session(session)
            self.increment_stat("sessions_ended")

    def increment_stat(self, key: str) -> None:
        """Increments a counter under the stats lock."""
        with self._stats_lock:
            self.stats[key] += 1

    def record_connection_error(self, error: Exception) -> None:
        self.stats["last_connection_error"] = {
            "timestamp": time.time(),
            "error": str(error)
        }

    def get_stats(self) -> Dict[str, Any]:
        """
        Get connection pool statistics.

        Returns:
            Dictionary containing connection pool statistics
        """
        with self._stats_lock:
            return dict(self.stats)
