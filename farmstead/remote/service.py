"""RemoteService abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from farmstead.remote.models import RemoteResponse


class RemoteService(ABC):
    """Abstract interface for the relational backend.

    Implementations report failures through RemoteResponse.error instead
    of raising, so callers decide whether a failure is fatal.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        contains: Mapping[str, Sequence[Any]] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> RemoteResponse:
        """Retrieve rows matching equality filters and array containment."""
        pass

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> RemoteResponse:
        """Insert one row; data is the created row."""
        pass

    @abstractmethod
    async def update(
        self,
        table: str,
        entity_id: Any,
        values: Mapping[str, Any],
        *,
        id_column: str = "id",
    ) -> RemoteResponse:
        """Update one row by identifier; data is the updated row."""
        pass

    @abstractmethod
    async def rpc(self, name: str, params: Mapping[str, Any]) -> RemoteResponse:
        """Call a remote procedure."""
        pass
