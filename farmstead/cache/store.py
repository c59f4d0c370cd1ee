"""KeyValueStore abstract interface."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract interface for the persistent string-keyed cache store.

    Operations are synchronous and values are opaque strings; callers
    serialize and deserialize. Backends raise KeyValueStoreError for any
    failure so callers can treat it as "no cache available".
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get the value stored under key, or None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        pass
