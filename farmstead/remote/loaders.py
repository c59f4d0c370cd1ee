"""Loader factories turning remote queries into repository loaders."""

from collections.abc import Awaitable, Callable
from typing import Any

from farmstead.remote.service import RemoteService


def remote_loader(
    remote: RemoteService,
    table: str,
    **query: Any,
) -> Callable[[], Awaitable[Any]]:
    """Build a zero-argument loader selecting rows from table.

    The loader raises RemoteServiceError on an error response, which the
    read-through repository treats as a failed fetch. A successful
    response without data loads as an empty list.
    """

    async def load() -> Any:
        response = await remote.select(table, **query)
        data = response.unwrap()
        return [] if data is None else data

    return load
