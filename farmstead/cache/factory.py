"""KeyValueStore factory for creating backend instances.

The Redis connection URL is read from configuration, which picks it up
from FARMSTEAD_STORAGE__CACHE__CONNECTION_URL or falls back to the
REDIS_URL environment variable.
"""

import os

from farmstead.cache.store import KeyValueStore
from farmstead.cache.stores.file import FileKeyValueStore
from farmstead.cache.stores.inmemory import InMemoryKeyValueStore
from farmstead.cache.stores.redis import RedisKeyValueStore
from farmstead.config.models.storage import KeyValueStoreConfig
from farmstead.observability.logging import get_logger

logger = get_logger(__name__)


def create_key_value_store(config: KeyValueStoreConfig) -> KeyValueStore:
    """Create a KeyValueStore instance based on configuration.

    The store is meant to be built once per process and injected into
    every repository sharing the cache.

    Raises:
        ValueError: If backend type is not supported or misconfigured
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_key_value_store", backend="inmemory")
        return InMemoryKeyValueStore()

    elif backend == "file":
        logger.info("creating_key_value_store", backend="file", directory=config.directory)
        return FileKeyValueStore(config.directory)

    elif backend == "redis":
        url = config.connection_url or os.environ.get("REDIS_URL")
        if not url:
            raise ValueError(
                "Redis cache backend requires storage.cache.connection_url or REDIS_URL"
            )
        logger.info(
            "creating_key_value_store",
            backend="redis",
            url=url,
            prefix=config.key_prefix,
        )
        return RedisKeyValueStore.from_url(
            url,
            key_prefix=config.key_prefix,
            socket_timeout=config.socket_timeout,
        )

    raise ValueError(f"Unsupported cache backend: {backend}")
