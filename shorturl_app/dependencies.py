"""
FastAPI dependencies for dependency injection.

Routes depend on the shortening service only; the service's collaborators
(validator, record store, sequence allocator) are built here from settings.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_db / get_validator)
- Flexible (swap backends via config)
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from shorturl_app.config import settings
from shorturl_app.database.connection import get_db
from shorturl_app.storage.factory import StorageFactory, StoreBackend
from shorturl_app.storage.sequence import SequenceAllocatorStrategy
from shorturl_app.storage.strategies import RecordStoreStrategy
from shorturl_app.validation.validator import URLValidator


@lru_cache()
def get_validator() -> URLValidator:
    """
    Get validator instance (singleton).

    Uses the system resolver; tests override this dependency with a
    validator backed by a fake resolver.
    """
    return URLValidator()


def get_record_store(db: Session = Depends(get_db)) -> RecordStoreStrategy:
    """Get the record store for the configured backend."""
    backend = StoreBackend(settings.store_backend)
    return StorageFactory.create_record_store(backend, db=db)


def get_sequence_allocator(db: Session = Depends(get_db)) -> SequenceAllocatorStrategy:
    """Get the sequence allocator for the configured backend."""
    backend = StoreBackend(settings.store_backend)
    return StorageFactory.create_allocator(backend, db=db)


def get_shortening_service(
    validator: URLValidator = Depends(get_validator),
    store: RecordStoreStrategy = Depends(get_record_store),
    allocator: SequenceAllocatorStrategy = Depends(get_sequence_allocator)
):
    """
    Get ShorteningService with all dependencies injected.

    FastAPI caches `get_db` per request, so the store and the allocator
    share one session.
    """
    from shorturl_app.services.url_service import ShorteningService
    return ShorteningService(
        validator=validator,
        store=store,
        allocator=allocator,
        namespace=settings.counter_namespace,
    )
