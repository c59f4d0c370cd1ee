"""Offline-resilient read-through cache.

Usage:
    repository = ReadThroughRepository(store, monitor)
    result = await repository.fetch(cache_key("products"), load_products)
    if result.is_stale:
        ...  # show a staleness indicator
"""

from farmstead.cache.keys import CacheKey, cache_key, date_range_token
from farmstead.cache.models import CacheEntry, FetchResult, FetchSource
from farmstead.cache.repository import ReadThroughRepository
from farmstead.cache.store import KeyValueStore

__all__ = [
    "CacheEntry",
    "CacheKey",
    "FetchResult",
    "FetchSource",
    "KeyValueStore",
    "ReadThroughRepository",
    "cache_key",
    "date_range_token",
]
