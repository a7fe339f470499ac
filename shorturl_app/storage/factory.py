"""
Factory for creating record stores and sequence allocators.
Gets configuration from settings; caches the Mongo client for the process.
"""

import logging
from enum import Enum
from typing import Optional

from pymongo import MongoClient
from sqlalchemy.orm import Session

from .sequence import MongoSequenceAllocator, SequenceAllocatorStrategy, SQLSequenceAllocator
from .strategies import MongoRecordStore, RecordStoreStrategy, SQLRecordStore
from shorturl_app.config import settings
from shorturl_app.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available storage backends"""
    SQL = "sql"
    MONGO = "mongo"


class StorageFactory:
    """
    Simple factory for the two storage components.

    SQL components wrap the request's session, so they are created per
    request. Mongo components share one client (MongoClient is thread-safe
    and pools its own connections).
    """

    _mongo_client: Optional[MongoClient] = None  # Single cached client

    URLS_COLLECTION = "urls"
    COUNTERS_COLLECTION = "counters"

    @classmethod
    def create_record_store(
        cls,
        backend: StoreBackend,
        db: Optional[Session] = None
    ) -> RecordStoreStrategy:
        """
        Create a record store for the given backend.

        Args:
            backend: Type of storage backend (from enum)
            db: SQLAlchemy session, required for the SQL backend

        Raises:
            StoreUnavailable: Mongo backend selected without MONGO_URI
        """
        if backend == StoreBackend.SQL:
            if db is None:
                raise ValueError("SQL record store needs a database session")
            return SQLRecordStore(db)
        elif backend == StoreBackend.MONGO:
            return MongoRecordStore(cls._mongo_database()[cls.URLS_COLLECTION])
        else:
            raise ValueError(f"Unknown storage backend: {backend}")

    @classmethod
    def create_allocator(
        cls,
        backend: StoreBackend,
        db: Optional[Session] = None
    ) -> SequenceAllocatorStrategy:
        """Create a sequence allocator for the given backend (see create_record_store)."""
        if backend == StoreBackend.SQL:
            if db is None:
                raise ValueError("SQL sequence allocator needs a database session")
            return SQLSequenceAllocator(db)
        elif backend == StoreBackend.MONGO:
            return MongoSequenceAllocator(cls._mongo_database()[cls.COUNTERS_COLLECTION])
        else:
            raise ValueError(f"Unknown storage backend: {backend}")

    @classmethod
    def _mongo_database(cls):
        if cls._mongo_client is None:
            if not settings.mongo_uri:
                raise StoreUnavailable("MONGO_URI is not configured")
            # MongoClient connects lazily; errors surface on first operation
            cls._mongo_client = MongoClient(
                settings.mongo_uri,
                serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            )
            logger.info("MongoDB client created for database '%s'", settings.mongo_database)
        return cls._mongo_client[settings.mongo_database]

    @classmethod
    def clear_instance(cls):
        """Close and forget the cached Mongo client (for testing)"""
        if cls._mongo_client is not None:
            cls._mongo_client.close()
        cls._mongo_client = None
