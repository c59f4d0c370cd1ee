"""Field-level change detection for audited entities."""

import math
from collections.abc import Iterable, Mapping
from typing import Any


def values_equal(old: Any, new: Any) -> bool:
    """Compare two field values by value.

    Numbers compare numerically (100 == 100.0 == Decimal("100")) and two
    NaN values are considered equal so a float round-trip never shows up
    as a change.
    """
    if (
        isinstance(old, float)
        and isinstance(new, float)
        and math.isnan(old)
        and math.isnan(new)
    ):
        return True
    return bool(old == new)


def diff(
    old_state: Mapping[str, Any],
    new_state: Mapping[str, Any],
    audited_fields: Iterable[str],
) -> frozenset[str]:
    """Return the audited fields whose values differ between two states.

    Fields outside audited_fields are ignored. A field missing from a
    mapping is read as None. An empty result means nothing worth
    recording changed.
    """
    return frozenset(
        field
        for field in audited_fields
        if not values_equal(old_state.get(field), new_state.get(field))
    )


def snapshot(state: Mapping[str, Any], audited_fields: Iterable[str]) -> dict[str, Any]:
    """Project a state onto exactly the audited fields."""
    return {field: state.get(field) for field in audited_fields}
