"""Tabular data store for experiment results.

This module owns the staging row, the committed table, and the derived
state, and provides column discovery, selection, and export on top.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from core.config import AccrualConfig, separator_problem
from core.constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_FILENAME_EXTENSION,
    FILENAME_DATE_FORMAT,
    FILENAME_SEGMENT_SEPARATOR,
    PRIVATE_COLUMN_PREFIX,
)
from core.errors import AccrualInvalidArgumentError
from core.logging_config import get_logger
from core.types import ExportBlob, ExportFormat, Row, SessionSnapshot, Table
from store.columns import discover_columns
from store.events import EventChannel, EventEmitter
from store.export_formats import (
    build_export_blob,
    format_csv_value,
    rows_to_csv,
    rows_to_json,
    rows_to_jsonl,
    unsupported_format_error,
)
from store.selection import (
    MATCH_ALL,
    ColumnSelector,
    SenderFilter,
    clean_rows,
    extract_column,
    resolve_columns,
    select_columns,
)
from store.state_view import StateView

_LOGGER = get_logger(__name__)


class DataStore:
    """Data accrued while a study runs.

    Values arrive through many independent ``set`` calls and collect in
    the staging row until ``commit`` appends a copy of it to the table.
    The state tracks, per column, the most recently set value across
    staging and all committed rows, and survives commits.
    """

    def __init__(
        self,
        events: EventEmitter | None = None,
        config: AccrualConfig | None = None,
    ) -> None:
        """Create an empty store.

        Args:
            events: Event channel receiving store notifications; a private
                ``EventChannel`` is created when omitted.
            config: Runtime configuration; defaults apply when omitted.
        """
        self.events: EventEmitter = events if events is not None else EventChannel()
        self._config = config if config is not None else AccrualConfig()
        self._data: Table = []
        self._staging: Row = {}
        self._state: Row = {}
        self._state_view = StateView(self)

    # Get and set individual values

    def set(
        self,
        key: str | Mapping[str, Any],
        value: Any = None,
        suppress_event: bool = False,
    ) -> None:
        """Set one or more values in the staging row and the state.

        Args:
            key: Column name, or a mapping of several columns to values.
            value: Value for a single column; ignored for mappings.
            suppress_event: Skip the ``set`` notification, for callers
                batching several writes into one.
        """
        partial = dict(key) if isinstance(key, Mapping) else {key: value}
        self._state.update(partial)
        self._staging.update(partial)
        if not suppress_event:
            self.events.emit("set")

    def get(self, key: str) -> Any:
        """Return the state value for a column, or ``None`` if never set."""
        return self._state.get(key)

    def get_any(self, keys: Sequence[str] = ()) -> Any:
        """Return the state value of the first column present in the state.

        Presence, not truthiness, decides: a column set to ``0`` or ``''``
        counts.
        """
        for key in keys:
            if key in self._state:
                return self._state[key]
        return None

    def has(self, key: str) -> bool:
        """Return whether the column has ever been set."""
        return key in self._state

    def state_keys(self) -> list[str]:
        """Return state column names in first-set order."""
        return list(self._state)

    @property
    def state(self) -> StateView:
        """Dynamic-key view reading the state and writing through ``set``."""
        return self._state_view

    @property
    def staging(self) -> Row:
        """Copy of the row currently being assembled."""
        return copy.deepcopy(self._staging)

    @property
    def data(self) -> Table:
        """Copy of the committed table."""
        return copy.deepcopy(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # Table mutation

    def commit(self) -> int:
        """Append a copy of the staging row to the table.

        Returns:
            Index of the newly added row.
        """
        self._data.append(copy.deepcopy(self._staging))
        row_index = len(self._data) - 1
        self._staging = {}
        _LOGGER.debug("row_committed", row_index=row_index)
        self.events.emit("commit")
        return row_index

    def update(self, index: int, transform: Callable[[Row], Row] = lambda row: row) -> None:
        """Replace a committed row with a transformed version of it.

        Args:
            index: Row position. ``len(store)`` appends a new row built
                from an empty one.
            transform: Function receiving a copy of the current row.

        Raises:
            AccrualInvalidArgumentError: If the index is negative or past
                the end of the table, or the transform returns no mapping.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise AccrualInvalidArgumentError(
                f"update() index must be an integer, got {type(index).__name__}."
            )
        if index < 0 or index > len(self._data):
            raise AccrualInvalidArgumentError(
                f"update() index {index} is out of range for a table of "
                f"{len(self._data)} rows. Use 0..{len(self._data)}."
            )
        current = copy.deepcopy(self._data[index]) if index < len(self._data) else {}
        updated = transform(current)
        if not isinstance(updated, Mapping):
            raise AccrualInvalidArgumentError(
                f"update() transform must return a row mapping, got {type(updated).__name__}. "
                "Return the modified row instead of editing it in place."
            )
        updated = copy.deepcopy(dict(updated))
        if index == len(self._data):
            self._data.append(updated)
        else:
            self._data[index] = updated
        self.events.emit("update")

    def clear(self) -> None:
        """Erase the table, staging row, and state.

        Listeners for ``clear`` run before anything is erased.
        """
        self.events.emit("clear")
        row_count = len(self._data)
        self._data = []
        self._staging = {}
        self._state = {}
        _LOGGER.info("store_cleared", row_count=row_count)

    def hydrate(self, data: Sequence[Mapping[str, Any]], state: Mapping[str, Any]) -> None:
        """Replace table and state wholesale, e.g. to restore a session.

        The staging row is left alone and no event is emitted.

        Raises:
            AccrualInvalidArgumentError: If data is not a list of mappings
                or state is not a mapping.
        """
        if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
            raise AccrualInvalidArgumentError(
                f"hydrate() data must be a list of rows, got {type(data).__name__}."
            )
        if not all(isinstance(row, Mapping) for row in data):
            raise AccrualInvalidArgumentError("hydrate() data rows must all be mappings.")
        if not isinstance(state, Mapping):
            raise AccrualInvalidArgumentError(
                f"hydrate() state must be a mapping, got {type(state).__name__}."
            )
        self._data = [copy.deepcopy(dict(row)) for row in data]
        self._state = copy.deepcopy(dict(state))
        _LOGGER.info("store_hydrated", row_count=len(self._data), state_columns=len(self._state))

    def hydrate_snapshot(self, snapshot: SessionSnapshot) -> None:
        """Restore table and state from a session snapshot."""
        self.hydrate(snapshot.data, snapshot.state)

    def snapshot(self) -> SessionSnapshot:
        """Reduce the store to its persisted-session representation."""
        return SessionSnapshot(data=self.data, state=copy.deepcopy(self._state))

    # Queries

    def keys(
        self,
        include_state: bool = False,
        prioritize: Sequence[str] | None = None,
    ) -> list[str]:
        """Extract column names from all rows.

        Args:
            include_state: Include columns that only appear in the state.
            prioritize: Columns to move to the front; defaults to the
                configured priority columns.

        Returns:
            Prioritized columns, then the remainder alphabetically.
        """
        priority = self._config.priority_columns if prioritize is None else prioritize
        state = self._state if include_state else None
        return discover_columns(self._data, priority, state)

    def extract(self, column: str, sender: SenderFilter = MATCH_ALL) -> list[Any]:
        """Extract a single column, optionally filtering by the sender column.

        Args:
            column: Column to extract across rows.
            sender: Anchored pattern string or compiled pattern matched
                against each row's ``sender``.

        Returns:
            Column values of matching rows in row order.
        """
        return extract_column(self._data, column, sender)

    def select(self, selector: ColumnSelector, sender: SenderFilter = MATCH_ALL) -> Table:
        """Select a subset of columns from the table.

        Args:
            selector: Column name, list of names, or a predicate applied to
                ``keys()``.
            sender: Sender filter, as for ``extract``.

        Returns:
            New rows holding only the selected columns.

        Raises:
            AccrualInvalidArgumentError: If the selector has an unusable shape.
        """
        columns = resolve_columns(selector, self.keys)
        return select_columns(self._data, columns, sender)

    @property
    def clean_data(self) -> Table:
        """Copy of the table omitting columns that start with an underscore."""
        return clean_rows(self._data)

    # Export

    def export_json(self, clean: bool = True) -> str:
        """Export the table as a JSON document.

        Args:
            clean: Omit columns starting with an underscore.
        """
        return rows_to_json(self._export_rows(clean))

    def export_jsonl(self, clean: bool = True) -> str:
        """Export the table as JSON lines, one row per line."""
        return rows_to_jsonl(self._export_rows(clean))

    def export_csv(self, separator: str | None = None, clean: bool = True) -> str:
        """Export the table as CSV in canonical column order.

        Args:
            separator: Column separator; defaults to the configured one.
            clean: Omit columns starting with an underscore.

        Returns:
            CSV text with a header line.
        """
        if separator is None:
            separator = self._config.csv_separator
        problem = separator_problem(separator)
        if problem is not None:
            raise AccrualInvalidArgumentError(f"export_csv() separator {separator!r}: {problem}")
        columns = [
            column
            for column in self.keys()
            if not clean or not column.startswith(PRIVATE_COLUMN_PREFIX)
        ]
        return rows_to_csv(self._export_rows(clean), columns, separator)

    def export_blob(
        self,
        export_format: ExportFormat = DEFAULT_EXPORT_FORMAT,
        clean: bool = True,
    ) -> ExportBlob:
        """Export the table into a MIME-typed binary blob.

        Args:
            export_format: One of ``csv``, ``json``, ``jsonl``.
            clean: Omit columns starting with an underscore.

        Raises:
            AccrualUnsupportedFormatError: For any other format.
        """
        if export_format == "csv":
            text = self.export_csv(clean=clean)
        elif export_format == "json":
            text = self.export_json(clean)
        elif export_format == "jsonl":
            text = self.export_jsonl(clean)
        else:
            raise unsupported_format_error(export_format)
        blob = build_export_blob(text, export_format)
        _LOGGER.info(
            "data_exported",
            export_format=export_format,
            clean=clean,
            row_count=len(self._data),
            size_bytes=blob.size,
        )
        return blob

    def guess_id(self, columns: Sequence[str] | None = None) -> Any:
        """Return the first available value among likely participant id columns."""
        return self.get_any(self._config.id_columns if columns is None else columns)

    def make_filename(
        self,
        prefix: str | None = None,
        extension: str | None = DEFAULT_FILENAME_EXTENSION,
        now: datetime | None = None,
    ) -> str:
        """Suggest a filename from prefix, participant id, and date.

        Args:
            prefix: Leading segment; defaults to the configured prefix.
            extension: File extension without dot; falsy omits it.
            now: Timestamp for the date segment; the current local time
                when omitted.

        Returns:
            ``prefix--[id--]date[.extension]``.
        """
        if prefix is None:
            prefix = self._config.filename_prefix
        participant_id = self.guess_id()
        stamp = (now if now is not None else datetime.now()).strftime(FILENAME_DATE_FORMAT)
        segments = [prefix]
        if participant_id:
            segments.append(str(participant_id))
        segments.append(stamp)
        filename = FILENAME_SEGMENT_SEPARATOR.join(segments)
        return f"{filename}.{extension}" if extension else filename

    def show(self) -> str:
        """Render the table as an aligned text grid in canonical column order."""
        columns = self.keys()
        grid = [columns] + [
            [format_csv_value(row.get(column)) for column in columns] for row in self._data
        ]
        widths = [max(len(line[position]) for line in grid) for position in range(len(columns))]
        lines = [
            " | ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
            for line in grid
        ]
        return "\n".join(lines)

    def _export_rows(self, clean: bool) -> Table:
        return self.clean_data if clean else self.data
