"""Cache storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

CacheBackendType = Literal["inmemory", "file", "redis"]


class KeyValueStoreConfig(BaseModel):
    """Configuration for the persistent key-value store behind the cache."""

    backend: CacheBackendType = Field(
        default="file",
        description="Backend type",
    )
    directory: str = Field(
        default=".farmstead/cache",
        description="Directory holding one file per key (file backend)",
    )
    connection_url: str | None = Field(
        default=None,
        description="Redis connection URL (from env var)",
    )
    key_prefix: str = Field(
        default="farmstead",
        description="Redis key prefix for cache keys",
    )
    socket_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Redis socket timeout in seconds",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    cache: KeyValueStoreConfig = Field(
        default_factory=KeyValueStoreConfig,
        description="Read-through cache store",
    )
