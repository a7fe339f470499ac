"""
Sequence allocators using Strategy Pattern.

A sequence is a named counter that only ever moves forward. Every
implementation must use the backend's own atomic increment-and-fetch so two
concurrent callers can never observe the same value; no implementation reads
the counter and writes it back from Python.
"""

import logging
from abc import ABC, abstractmethod

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shorturl_app.exceptions import StoreUnavailable
from shorturl_app.models.counter import Counter

logger = logging.getLogger(__name__)


class SequenceAllocatorStrategy(ABC):
    """Abstract base class for sequence allocators."""

    @abstractmethod
    def next(self, namespace: str) -> int:
        """
        Atomically increment the counter and return the new value.

        Creates the counter on first use if it is missing.

        Raises:
            StoreUnavailable: the store could not complete the increment.
                No value has been consumed from the caller's point of view.
        """
        pass

    @abstractmethod
    def ensure(self, namespace: str) -> None:
        """Create the counter at 0 if it does not exist yet (idempotent)."""
        pass


class SQLSequenceAllocator(SequenceAllocatorStrategy):
    """
    Counter rows in the `counters` table.

    The increment is a single `UPDATE ... SET seq = seq + 1 ... RETURNING seq`
    statement, so the database serializes concurrent callers.
    """

    def __init__(self, db: Session):
        self.db = db

    def next(self, namespace: str) -> int:
        try:
            value = self._increment(namespace)
            if value is None:
                # Lazy creation: the counter was never initialized
                self.ensure(namespace)
                value = self._increment(namespace)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Could not allocate from sequence '{namespace}': {e}") from e

        if value is None:
            raise StoreUnavailable(f"Sequence '{namespace}' disappeared during allocation")
        return value

    def ensure(self, namespace: str) -> None:
        if self.db.get(Counter, namespace) is not None:
            logger.debug("Counter for %s already exists", namespace)
            return

        self.db.add(Counter(name=namespace, seq=0))
        try:
            self.db.commit()
            logger.info("Counter for %s initialized", namespace)
        except IntegrityError:
            # Another process created it between our check and insert
            self.db.rollback()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Could not initialize sequence '{namespace}': {e}") from e

    def _increment(self, namespace: str):
        stmt = (
            update(Counter)
            .where(Counter.name == namespace)
            .values(seq=Counter.seq + 1)
            .returning(Counter.seq)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).scalar_one_or_none()


class MongoSequenceAllocator(SequenceAllocatorStrategy):
    """
    Counter documents `{"_id": namespace, "seq": n}` in a Mongo collection.

    `find_one_and_update` with `$inc` and `upsert=True` is atomic on the
    server and also covers lazy creation.
    """

    def __init__(self, collection):
        """
        Args:
            collection: pymongo Collection holding the counter documents
        """
        self.collection = collection

    def next(self, namespace: str) -> int:
        try:
            counter = self.collection.find_one_and_update(
                {"_id": namespace},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreUnavailable(f"Could not allocate from sequence '{namespace}': {e}") from e
        return counter["seq"]

    def ensure(self, namespace: str) -> None:
        try:
            if self.collection.find_one({"_id": namespace}) is not None:
                logger.debug("Counter for %s already exists", namespace)
                return
            self.collection.insert_one({"_id": namespace, "seq": 0})
            logger.info("Counter for %s initialized", namespace)
        except DuplicateKeyError:
            # Created concurrently by another process
            pass
        except PyMongoError as e:
            raise StoreUnavailable(f"Could not initialize sequence '{namespace}': {e}") from e
