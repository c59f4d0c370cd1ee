"""Read-through repository serving console screens.

Fetches from the backend when possible, refreshes the cache on success,
and degrades to the last good cached response when connectivity is
absent or the fetch fails.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from farmstead.cache.keys import CacheKey
from farmstead.cache.models import CacheEntry, FetchResult, FetchSource
from farmstead.cache.store import KeyValueStore
from farmstead.connectivity.monitor import ConnectivityMonitor
from farmstead.exceptions import KeyValueStoreError
from farmstead.observability.logging import get_logger
from farmstead.observability.metrics import (
    CACHE_FETCHES,
    CACHE_INVALID_ENTRIES,
    CACHE_STORE_ERRORS,
)

logger = get_logger(__name__)

UNLABELLED_ENTITY = "other"

T = TypeVar("T")

Loader = Callable[[], Awaitable[T]]

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def _entity_of(key: str) -> str:
    """Metric label for a key: the entity it was built for."""
    if isinstance(key, CacheKey):
        return key.entity
    return UNLABELLED_ENTITY


class ReadThroughRepository:
    """Cache-aside reads over a KeyValueStore.

    Each screen supplies only a key and a loader. The repository never
    raises the loader's error: results are tagged live, cache or empty,
    and an empty result is a valid terminal state rather than a failure.

    Concurrent fetches of one key are not de-duplicated; each caller may
    run its own live fetch and the last successful write wins.
    """

    def __init__(
        self,
        store: KeyValueStore,
        connectivity: ConnectivityMonitor,
    ) -> None:
        """Initialize the repository.

        Args:
            store: Persistent store shared by all screens of the process
            connectivity: Reachability signal consulted before each fetch
        """
        self._store = store
        self._connectivity = connectivity

    async def fetch(
        self,
        key: str,
        loader: Loader[T],
        *,
        schema: Any = None,
        default_factory: Callable[[], Any] = list,
    ) -> FetchResult[T]:
        """Fetch data for key, falling back to the cache.

        Args:
            key: Deterministic cache key; keys built by cache_key carry their
                entity, which labels the fetch metrics
            loader: Zero-argument coroutine function performing the live fetch
            schema: Optional type describing the payload; cached payloads that
                do not validate against it are ignored
            default_factory: Builds the data returned with source "empty"

        Returns:
            FetchResult tagged with the source that produced the data
        """
        adapter = TypeAdapter(schema) if schema is not None else _ANY_ADAPTER

        if not await self._connectivity.is_online():
            cached = self._read(key, adapter)
            if cached is not None:
                logger.debug("cache_served_offline", key=key)
                return self._result(key, *cached)
            logger.debug("cache_miss_offline", key=key)

        try:
            data = await loader()
        except Exception as e:
            logger.warning("live_fetch_failed", key=key, error=str(e))
            cached = self._read(key, adapter)
            if cached is not None:
                return self._result(key, *cached)
            CACHE_FETCHES.labels(entity=_entity_of(key), source=FetchSource.EMPTY.value).inc()
            return FetchResult(data=default_factory(), source=FetchSource.EMPTY)

        self._write(key, data, adapter)
        CACHE_FETCHES.labels(entity=_entity_of(key), source=FetchSource.LIVE.value).inc()
        return FetchResult(data=data, source=FetchSource.LIVE)

    def _result(self, key: str, data: Any, entry: CacheEntry) -> FetchResult[Any]:
        CACHE_FETCHES.labels(entity=_entity_of(key), source=FetchSource.CACHE.value).inc()
        return FetchResult(data=data, source=FetchSource.CACHE, stored_at=entry.stored_at)

    def _read(
        self, key: str, adapter: TypeAdapter[Any]
    ) -> tuple[Any, CacheEntry] | None:
        """Read and validate the cached entry for key.

        Store failures, unparseable entries and payloads that no longer
        match the schema all count as "no cache".
        """
        try:
            raw = self._store.get(key)
        except KeyValueStoreError as e:
            CACHE_STORE_ERRORS.labels(operation="get").inc()
            logger.warning("cache_get_error", key=key, error=str(e))
            return None

        if raw is None:
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
            if entry.key != key:
                raise ValueError(f"entry stored for {entry.key!r}")
            data = adapter.validate_python(entry.payload)
        except (ValidationError, ValueError) as e:
            CACHE_INVALID_ENTRIES.labels(entity=_entity_of(key)).inc()
            logger.warning("cache_entry_invalid", key=key, error=str(e))
            return None

        return data, entry

    def _write(self, key: str, data: Any, adapter: TypeAdapter[Any]) -> None:
        """Overwrite the entry for key with a successful live result."""
        try:
            payload = adapter.dump_python(data, mode="json")
            entry = CacheEntry(key=str(key), payload=payload)
            self._store.set(key, entry.model_dump_json())
        except KeyValueStoreError as e:
            CACHE_STORE_ERRORS.labels(operation="set").inc()
            logger.warning("cache_set_error", key=key, error=str(e))
        except (ValueError, TypeError) as e:
            logger.warning("cache_payload_unserializable", key=key, error=str(e))
        else:
            logger.debug("cache_refreshed", key=key)
