"""
Tests for the Mongo backend against mocked pymongo collections.

These check the calls made to the driver (atomic $inc, unique index,
error translation) without a running MongoDB.
"""
from unittest.mock import MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from shorturl_app.config import settings
from shorturl_app.database.connection import initialize_store
from shorturl_app.exceptions import DuplicateKey, StoreUnavailable
from shorturl_app.storage.factory import StorageFactory, StoreBackend
from shorturl_app.storage.sequence import MongoSequenceAllocator
from shorturl_app.storage.strategies import MongoRecordStore


class TestMongoSequenceAllocator:

    def test_next_uses_atomic_increment(self):
        collection = MagicMock()
        collection.find_one_and_update.return_value = {"_id": "urls", "seq": 5}

        value = MongoSequenceAllocator(collection).next("urls")

        assert value == 5
        collection.find_one_and_update.assert_called_once_with(
            {"_id": "urls"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        # No application-level read-modify-write
        collection.find_one.assert_not_called()
        collection.update_one.assert_not_called()

    def test_next_translates_connection_errors(self):
        collection = MagicMock()
        collection.find_one_and_update.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(StoreUnavailable):
            MongoSequenceAllocator(collection).next("urls")

    def test_ensure_creates_counter_at_zero(self):
        collection = MagicMock()
        collection.find_one.return_value = None

        MongoSequenceAllocator(collection).ensure("urls")

        collection.insert_one.assert_called_once_with({"_id": "urls", "seq": 0})

    def test_ensure_keeps_existing_counter(self):
        collection = MagicMock()
        collection.find_one.return_value = {"_id": "urls", "seq": 41}

        MongoSequenceAllocator(collection).ensure("urls")

        collection.insert_one.assert_not_called()

    def test_ensure_tolerates_concurrent_creation(self):
        collection = MagicMock()
        collection.find_one.return_value = None
        collection.insert_one.side_effect = DuplicateKeyError("E11000")

        MongoSequenceAllocator(collection).ensure("urls")


class TestMongoRecordStore:

    def test_find_by_short_url(self):
        collection = MagicMock()
        collection.find_one.return_value = {
            "_id": "abc", "originalURL": "https://www.example.com", "shortURL": 3
        }

        record = MongoRecordStore(collection).find_by_short_url(3)

        assert record.original_url == "https://www.example.com"
        assert record.short_url == 3
        collection.find_one.assert_called_once_with({"shortURL": 3})

    def test_find_missing_returns_none(self):
        collection = MagicMock()
        collection.find_one.return_value = None

        assert MongoRecordStore(collection).find_by_original_url("https://x.example.com") is None

    def test_insert(self):
        collection = MagicMock()

        record = MongoRecordStore(collection).insert("https://www.example.com", 1)

        assert record.short_url == 1
        collection.insert_one.assert_called_once_with(
            {"originalURL": "https://www.example.com", "shortURL": 1}
        )

    def test_insert_duplicate_short_url(self):
        collection = MagicMock()
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(DuplicateKey):
            MongoRecordStore(collection).insert("https://www.example.com", 1)

    def test_insert_store_down(self):
        collection = MagicMock()
        collection.insert_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(StoreUnavailable):
            MongoRecordStore(collection).insert("https://www.example.com", 1)

    def test_short_url_index_is_unique(self):
        collection = MagicMock()

        MongoRecordStore(collection).ensure_indexes()

        collection.create_index.assert_any_call([("shortURL", 1)], unique=True)


class TestMongoConfiguration:

    @pytest.fixture(autouse=True)
    def mongo_backend(self, monkeypatch):
        StorageFactory.clear_instance()
        monkeypatch.setattr(settings, "store_backend", "mongo")
        monkeypatch.setattr(settings, "mongo_uri", None)
        yield
        StorageFactory.clear_instance()

    def test_missing_uri_is_store_unavailable(self):
        with pytest.raises(StoreUnavailable):
            StorageFactory.create_record_store(StoreBackend.MONGO)

    def test_startup_logs_and_continues_without_uri(self, caplog):
        assert initialize_store() is False
        assert "Store initialization failed" in caplog.text
