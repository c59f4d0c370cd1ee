"""Cache domain models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class FetchSource(str, Enum):
    """Where the data returned by a read-through fetch came from."""

    LIVE = "live"
    CACHE = "cache"
    EMPTY = "empty"


class CacheEntry(BaseModel):
    """One cached response, serialized as JSON into the key-value store.

    The payload mirrors the remote response shape verbatim.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Deterministic cache key")
    payload: Any = Field(..., description="JSON-serializable response data")
    stored_at: datetime = Field(
        default_factory=utc_now, description="When the live fetch succeeded"
    )


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Data returned by ReadThroughRepository.fetch.

    Attributes:
        data: The live result, the cached payload, or the empty default
        source: Which path produced data
        stored_at: Time of the successful fetch behind cached data
    """

    data: T
    source: FetchSource
    stored_at: datetime | None = None

    @property
    def is_stale(self) -> bool:
        """True when data came from the cache rather than the backend."""
        return self.source == FetchSource.CACHE

    @property
    def is_empty(self) -> bool:
        return self.source == FetchSource.EMPTY
