"""Deterministic cache key construction.

Keys look like ``<entity>_<discriminator>_<discriminator>...``, e.g.
``sales_orders_data_u42_pending_all`` or ``products_all``.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

ALL = "all"


class CacheKey(str):
    """A cache key string that remembers the entity it was built for."""

    entity: str

    def __new__(cls, value: str, entity: str) -> "CacheKey":
        key = super().__new__(cls, value)
        key.entity = entity
        return key


def _token(value: Any) -> str:
    """Serialize one filter parameter into a key token."""
    if value is None or value == "":
        return ALL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _token(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(_token(v) for v in value)
        return "+".join(items) if items else ALL
    return str(value)


def cache_key(entity: str, *discriminators: Any) -> CacheKey:
    """Build the cache key for an entity and its active filters.

    Missing filters (None or empty string) serialize as ``all`` so that
    "no filter" and "filter not chosen yet" share one entry. An entity
    read without discriminators gets the ``all`` suffix.

    Args:
        entity: Entity or screen name, e.g. "products" or "on_demand_overview_data"
        *discriminators: Filter values in a fixed, caller-defined order

    Returns:
        The cache key, a str carrying entity for metric labels
    """
    if not entity:
        raise ValueError("entity name is required for a cache key")
    tokens = [_token(d) for d in discriminators] or [ALL]
    return CacheKey("_".join([entity, *tokens]), entity)


def date_range_token(start: date | None, end: date | None) -> str:
    """Serialize a report date range as a single discriminator."""
    return f"{_token(start)}..{_token(end)}"
