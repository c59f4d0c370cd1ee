"""Redis implementation of KeyValueStore.

Uses the synchronous redis client: the store contract is one blocking
call per get/set, and the repository never holds a value across awaits.
"""

import redis

from farmstead.cache.store import KeyValueStore
from farmstead.exceptions import KeyValueStoreError


class RedisKeyValueStore(KeyValueStore):
    """KeyValueStore backed by Redis strings.

    Key format: {prefix}:{key}. Entries carry no TTL; a key is only
    replaced by a later successful fetch.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "farmstead") -> None:
        """Initialize the store.

        Args:
            client: Redis client instance
            key_prefix: Prefix for Redis keys
        """
        self._redis = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        key_prefix: str = "farmstead",
        socket_timeout: float = 2.0,
    ) -> "RedisKeyValueStore":
        """Create a store with a client connected to url."""
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            decode_responses=True,
        )
        return cls(client, key_prefix=key_prefix)

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    def get(self, key: str) -> str | None:
        try:
            value = self._redis.get(self._make_key(key))
        except redis.RedisError as e:
            raise KeyValueStoreError(
                f"Redis get failed: {e}", operation="get", key=key
            ) from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else value

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._make_key(key), value)
        except redis.RedisError as e:
            raise KeyValueStoreError(
                f"Redis set failed: {e}", operation="set", key=key
            ) from e

    def remove(self, key: str) -> None:
        try:
            self._redis.delete(self._make_key(key))
        except redis.RedisError as e:
            raise KeyValueStoreError(
                f"Redis delete failed: {e}", operation="remove", key=key
            ) from e
