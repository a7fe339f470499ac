"""
SQLAlchemy engine and session setup.

The relational backend is the default store. The Mongo backend does not use
the engine at all, but `get_db` is still a request dependency so routes look
the same whichever backend is configured.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from shorturl_app.config import settings
from shorturl_app.exceptions import ShortURLError

logger = logging.getLogger(__name__)

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # SQLite connections are shared between the event loop and threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Yield a database session and close it when the request is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def initialize_store() -> bool:
    """
    Prepare the configured backend at startup.

    Creates tables (sql) or indexes (mongo) and makes sure the short URL
    counter exists. A failure is logged and reported through the return
    value; the process keeps running and requests fail until the store
    becomes reachable.

    Returns:
        True if the store is ready, False otherwise
    """
    from shorturl_app.storage.factory import StorageFactory, StoreBackend

    try:
        backend = StoreBackend(settings.store_backend)
    except ValueError:
        logger.error("Store initialization failed: unknown backend %r", settings.store_backend)
        return False

    namespace = settings.counter_namespace
    db = None
    try:
        if backend == StoreBackend.SQL:
            # Import models so they're registered with Base
            from shorturl_app import models  # noqa: F401

            Base.metadata.create_all(bind=engine)
            db = SessionLocal()
        else:
            StorageFactory.create_record_store(backend).ensure_indexes()

        allocator = StorageFactory.create_allocator(backend, db=db)
        allocator.ensure(namespace)
    except (ShortURLError, SQLAlchemyError) as e:
        logger.error("Store initialization failed (%s backend): %s", backend.value, e)
        return False
    finally:
        if db is not None:
            db.close()

    logger.info("Store ready (%s backend), counter '%s' initialized", backend.value, namespace)
    return True
