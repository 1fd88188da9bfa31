# backend/chart_api/db/mongo.py
"""MongoDB connection management"""

from __future__ import annotations
import asyncio
from typing import Callable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from chart_api.core.config import Settings
from chart_api.core.errors import DatabaseUnavailableError
from chart_api.logger import get_logger

log = get_logger(__name__)


def cluster_host(uri: str) -> str:
    """Host part of a connection string, without scheme, credentials or path"""
    rest = uri.split("://", 1)[-1]
    rest = rest.rsplit("@", 1)[-1]
    return rest.split("/", 1)[0].split("?", 1)[0]


class MongoConnection:
    """
    Process-wide MongoDB handle. Created once per app and injected into
    request handlers; connect() is idempotent and safe to await from
    overlapping first requests (only one client is ever created).
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        *,
        server_selection_timeout_ms: int = 5000,
        max_pool_size: int = 10,
        timeout_seconds: float = 10.0,
        client_factory: Callable[..., AsyncIOMotorClient] = AsyncIOMotorClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.max_pool_size = max_pool_size
        self.timeout_seconds = timeout_seconds
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, s: Settings) -> "MongoConnection":
        return cls(
            s.MONGO_URI,
            s.MONGO_DB_NAME,
            server_selection_timeout_ms=s.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            max_pool_size=s.MONGO_MAX_POOL_SIZE,
            timeout_seconds=s.QUERY_TIMEOUT_SECONDS,
        )

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def cluster(self) -> str:
        return cluster_host(self.uri)

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise DatabaseUnavailableError("Database not connected")
        return self._db

    async def connect(self) -> AsyncIOMotorDatabase:
        """Connect and ping once; later calls return the same database."""
        if self._db is not None:
            return self._db

        async with self._lock:
            if self._db is not None:
                return self._db

            log.info("Connecting to MongoDB cluster %s ...", self.cluster)
            client = None
            try:
                # mongodb+srv:// URIs resolve DNS here and raise ConfigurationError
                client = self._client_factory(
                    self.uri,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    maxPoolSize=self.max_pool_size,
                )
                await client.admin.command("ping")
            except PyMongoError as e:
                if client is not None:
                    client.close()
                log.error("MongoDB connection failed: %s", e)
                raise DatabaseUnavailableError() from e

            self._client = client
            self._db = client[self.db_name]
            log.info("Connected to MongoDB: %s", self.db_name)
            return self._db

    async def list_collection_names(self) -> List[str]:
        return await asyncio.wait_for(
            self.db.list_collection_names(maxTimeMS=int(self.timeout_seconds * 1000)),
            timeout=self.timeout_seconds,
        )

    async def close(self) -> None:
        async with self._lock:
            if self._client is not None:
                self._client.close()
                log.info("Disconnected from MongoDB")
            self._client = None
            self._db = None
