"""
URL record stores using Strategy Pattern.

Allows switching between backends without touching the service layer:
- SQL: SQLAlchemy session (SQLite by default, any SQLAlchemy URL works)
- Mongo: pymongo collection, document layout of the original service

Both stores return plain `URLRecord` objects so nothing above this layer
sees ORM rows or raw documents. Driver errors are translated into
`DuplicateKey` / `StoreUnavailable`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shorturl_app.exceptions import DuplicateKey, StoreUnavailable
from shorturl_app.models.url import URL
from shorturl_app.schemas.url import URLRecord

logger = logging.getLogger(__name__)


class RecordStoreStrategy(ABC):
    """
    Abstract base class for URL record stores.

    Records are immutable once inserted: there is no update or delete.
    """

    @abstractmethod
    def find_by_original_url(self, original_url: str) -> Optional[URLRecord]:
        """
        Find the record for an original URL (used for de-duplication).

        If a race left several records for the same URL, the oldest wins.
        """
        pass

    @abstractmethod
    def find_by_short_url(self, short_url: int) -> Optional[URLRecord]:
        """Find the record assigned to a short URL."""
        pass

    @abstractmethod
    def insert(self, original_url: str, short_url: int) -> URLRecord:
        """
        Persist a new record.

        Raises:
            DuplicateKey: a record with this short URL already exists
            StoreUnavailable: the store could not complete the write
        """
        pass


class SQLRecordStore(RecordStoreStrategy):
    """Records as rows of the `urls` table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_original_url(self, original_url: str) -> Optional[URLRecord]:
        try:
            url = (
                self.db.query(URL)
                .filter(URL.original_url == original_url)
                .order_by(URL.id)
                .first()
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Lookup by original URL failed: {e}") from e
        return URLRecord.model_validate(url) if url else None

    def find_by_short_url(self, short_url: int) -> Optional[URLRecord]:
        try:
            url = self.db.query(URL).filter(URL.short_url == short_url).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Lookup by short URL failed: {e}") from e
        return URLRecord.model_validate(url) if url else None

    def insert(self, original_url: str, short_url: int) -> URLRecord:
        url = URL(original_url=original_url, short_url=short_url)
        self.db.add(url)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateKey(f"Short URL {short_url} is already assigned") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Insert failed: {e}") from e

        self.db.refresh(url)
        return URLRecord.model_validate(url)


class MongoRecordStore(RecordStoreStrategy):
    """
    Records as documents `{"originalURL": ..., "shortURL": n}`.

    `shortURL` carries a unique index (see `ensure_indexes`) so a racing
    insert surfaces as `DuplicateKeyError`.
    """

    def __init__(self, collection):
        """
        Args:
            collection: pymongo Collection holding the URL documents
        """
        self.collection = collection

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index([("shortURL", ASCENDING)], unique=True)
            self.collection.create_index([("originalURL", ASCENDING)])
        except PyMongoError as e:
            raise StoreUnavailable(f"Could not create indexes: {e}") from e

    def find_by_original_url(self, original_url: str) -> Optional[URLRecord]:
        try:
            doc = self.collection.find_one(
                {"originalURL": original_url},
                sort=[("_id", ASCENDING)],
            )
        except PyMongoError as e:
            raise StoreUnavailable(f"Lookup by original URL failed: {e}") from e
        return self._to_record(doc)

    def find_by_short_url(self, short_url: int) -> Optional[URLRecord]:
        try:
            doc = self.collection.find_one({"shortURL": short_url})
        except PyMongoError as e:
            raise StoreUnavailable(f"Lookup by short URL failed: {e}") from e
        return self._to_record(doc)

    def insert(self, original_url: str, short_url: int) -> URLRecord:
        try:
            self.collection.insert_one({"originalURL": original_url, "shortURL": short_url})
        except DuplicateKeyError as e:
            raise DuplicateKey(f"Short URL {short_url} is already assigned") from e
        except PyMongoError as e:
            raise StoreUnavailable(f"Insert failed: {e}") from e
        return URLRecord(original_url=original_url, short_url=short_url)

    @staticmethod
    def _to_record(doc) -> Optional[URLRecord]:
        if doc is None:
            return None
        return URLRecord(original_url=doc["originalURL"], short_url=doc["shortURL"])
