"""Row filtering and column projection helpers.

This module implements sender filtering, single-column extraction,
multi-column selection, and private-column cleaning over row lists.
"""

from __future__ import annotations

import copy
import re
from typing import Any, Callable, Sequence, Union

from core.constants import PRIVATE_COLUMN_PREFIX, SENDER_COLUMN
from core.errors import AccrualInvalidArgumentError
from core.types import Row, Table

SenderFilter = Union[str, "re.Pattern[str]"]
ColumnSelector = Union[str, Sequence[str], Callable[[str], bool]]

MATCH_ALL = re.compile(".*")


def compile_sender_filter(sender: SenderFilter) -> "re.Pattern[str]":
    """Normalize a sender filter into a compiled pattern.

    Strings are anchored at both ends, so a plain name only matches
    that exact sender. Compiled patterns are used as given.

    Args:
        sender: Sender name/pattern string or compiled pattern.

    Returns:
        Compiled pattern applied with ``search``.

    Raises:
        AccrualInvalidArgumentError: If the filter is not a string or
            pattern, or the string is not a valid pattern.
    """
    if isinstance(sender, re.Pattern):
        return sender
    if not isinstance(sender, str):
        raise AccrualInvalidArgumentError(
            "Sender filter must be a string or a compiled regular expression, "
            f"got {type(sender).__name__}."
        )
    try:
        return re.compile(rf"\A(?:{sender})\Z")
    except re.error as error:
        raise AccrualInvalidArgumentError(
            f"Sender filter {sender!r} is not a valid pattern: {error}."
        ) from error


def filter_by_sender(rows: Table, sender: SenderFilter) -> Table:
    """Keep rows whose ``sender`` matches; missing senders read as ``''``."""
    pattern = compile_sender_filter(sender)
    return [row for row in rows if pattern.search(_sender_of(row)) is not None]


def extract_column(rows: Table, column: str, sender: SenderFilter = MATCH_ALL) -> list[Any]:
    """Return one column's value from each row matching the sender filter.

    Args:
        rows: Rows to scan.
        column: Column to extract; absent cells yield ``None``.
        sender: Sender filter.

    Returns:
        Column values in row order.
    """
    return [copy.deepcopy(row.get(column)) for row in filter_by_sender(rows, sender)]


def resolve_columns(selector: ColumnSelector, available: Callable[[], list[str]]) -> list[str]:
    """Turn a selector into an ordered list of column names.

    Args:
        selector: Column name, sequence of names, or predicate over names.
        available: Callable returning the discovered columns, evaluated
            only for predicate selectors.

    Returns:
        Selected column names.

    Raises:
        AccrualInvalidArgumentError: If the selector has an unusable shape.
    """
    columns: object
    if isinstance(selector, str):
        columns = [selector]
    elif callable(selector):
        columns = [column for column in available() if selector(column)]
    else:
        columns = selector
    if not isinstance(columns, (list, tuple)) or not all(
        isinstance(column, str) for column in columns
    ):
        raise AccrualInvalidArgumentError(
            "select() expects a column name, a list of column names, "
            f"or a filter function, got {type(selector).__name__}."
        )
    return list(columns)


def select_columns(rows: Table, columns: Sequence[str], sender: SenderFilter = MATCH_ALL) -> Table:
    """Project matching rows onto the given columns.

    Columns absent from a row are left out of that row's result.
    """
    return [
        {column: copy.deepcopy(row[column]) for column in columns if column in row}
        for row in filter_by_sender(rows, sender)
    ]


def clean_rows(rows: Table) -> Table:
    """Copy rows without keys that start with an underscore."""
    return [
        {
            key: copy.deepcopy(value)
            for key, value in row.items()
            if not key.startswith(PRIVATE_COLUMN_PREFIX)
        }
        for row in rows
    ]


def _sender_of(row: Row) -> str:
    sender = row.get(SENDER_COLUMN)
    if sender is None:
        return ""
    return str(sender)
