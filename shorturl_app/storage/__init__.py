"""
Storage module for URL records and sequence counters.

This module implements the Strategy Pattern for pluggable backends.
The record store and the sequence allocator are independent components
that happen to live in the same database.
"""

from .strategies import RecordStoreStrategy, SQLRecordStore, MongoRecordStore
from .sequence import SequenceAllocatorStrategy, SQLSequenceAllocator, MongoSequenceAllocator
from .factory import StorageFactory, StoreBackend

__all__ = [
    "RecordStoreStrategy",
    "SQLRecordStore",
    "MongoRecordStore",
    "SequenceAllocatorStrategy",
    "SQLSequenceAllocator",
    "MongoSequenceAllocator",
    "StorageFactory",
    "StoreBackend",
]
