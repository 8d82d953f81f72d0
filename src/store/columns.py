"""Column discovery across heterogeneous rows.

This module derives the canonical column order used by CSV export,
predicate selection, and table display.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from core.types import Row


def discover_columns(
    rows: Iterable[Row],
    prioritize: Sequence[str],
    state: Mapping[str, object] | None = None,
) -> list[str]:
    """Return the de-duplicated column names of all rows.

    Args:
        rows: Committed rows to scan.
        prioritize: Column names moved to the front, in this order,
            when present.
        state: Optional state mapping whose keys are included too.

    Returns:
        Prioritized columns followed by remaining columns alphabetically.
    """
    found: set[str] = set()
    for row in rows:
        found.update(row)
    if state is not None:
        found.update(state)
    unique_columns = sorted(found)
    prioritized = [column for column in dict.fromkeys(prioritize) if column in found]
    prioritized_set = set(prioritized)
    remaining = [column for column in unique_columns if column not in prioritized_set]
    return prioritized + remaining
