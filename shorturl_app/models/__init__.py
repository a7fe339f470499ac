"""
Database models for the relational backend.

The Mongo backend stores the same two entities as documents in the
`urls` and `counters` collections.
"""

from .url import URL
from .counter import Counter

__all__ = ["URL", "Counter"]
