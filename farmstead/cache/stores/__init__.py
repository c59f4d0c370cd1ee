"""Key-value store backends for the read-through cache."""

from farmstead.cache.store import KeyValueStore
from farmstead.cache.stores.file import FileKeyValueStore
from farmstead.cache.stores.inmemory import InMemoryKeyValueStore
from farmstead.cache.stores.redis import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]
