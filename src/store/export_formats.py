"""Text encoders for store exports.

This module renders row lists as JSON, JSONL, and CSV text and wraps
exported text in MIME-typed binary blobs.
"""

from __future__ import annotations

from datetime import date, datetime, time
import json
import math
from typing import Any, Sequence

from core.constants import (
    EXPORT_MIME_TYPES,
    EXPORT_TEXT_ENCODING,
    SUPPORTED_EXPORT_FORMATS,
)
from core.errors import AccrualUnsupportedFormatError
from core.types import ExportBlob, Table

_JSON_SEPARATORS = (",", ":")
_CSV_QUOTE = '"'
_CSV_LINE_BREAKS = ("\r", "\n")


def rows_to_json(rows: Table) -> str:
    """Serialize rows as one compact JSON array document."""
    return _dumps(rows)


def rows_to_jsonl(rows: Table) -> str:
    """Serialize rows as newline-joined JSON objects without a trailing newline."""
    return "\n".join(_dumps(row) for row in rows)


def rows_to_csv(rows: Table, columns: Sequence[str], separator: str) -> str:
    """Serialize rows as CSV text in the given column order.

    Args:
        rows: Rows to render.
        columns: Header columns; each line renders exactly these cells.
        separator: Column separator.

    Returns:
        Header line followed by one line per row, newline-joined.
    """
    lines = [separator.join(escape_csv_cell(column, separator) for column in columns)]
    for row in rows:
        cells = [format_csv_value(row.get(column)) for column in columns]
        lines.append(separator.join(escape_csv_cell(cell, separator) for cell in cells))
    return "\n".join(lines)


def format_csv_value(value: Any) -> str:
    """Render one cell value as text.

    Missing values become empty strings, booleans use lowercase
    literals, dates use ISO-8601, and nested objects become JSON.
    """
    if value is None or _is_non_finite(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return _dumps(value)
    return str(value)


def escape_csv_cell(text: str, separator: str) -> str:
    """Quote a cell only when it holds the separator, quotes, or line breaks."""
    needs_quotes = (
        separator in text
        or _CSV_QUOTE in text
        or any(line_break in text for line_break in _CSV_LINE_BREAKS)
    )
    if not needs_quotes:
        return text
    escaped = text.replace(_CSV_QUOTE, _CSV_QUOTE * 2)
    return f"{_CSV_QUOTE}{escaped}{_CSV_QUOTE}"


def build_export_blob(text: str, export_format: str) -> ExportBlob:
    """Wrap exported text into a MIME-typed binary blob.

    Raises:
        AccrualUnsupportedFormatError: If the format has no MIME type.
    """
    mime_type = EXPORT_MIME_TYPES.get(export_format)
    if mime_type is None:
        raise unsupported_format_error(export_format)
    return ExportBlob(content=text.encode(EXPORT_TEXT_ENCODING), mime_type=mime_type)


def unsupported_format_error(export_format: object) -> AccrualUnsupportedFormatError:
    return AccrualUnsupportedFormatError(
        f"Unsupported export format {export_format!r}. "
        f"Use one of: {', '.join(SUPPORTED_EXPORT_FORMATS)}."
    )


def _dumps(payload: object) -> str:
    return json.dumps(
        _replace_non_finite(payload),
        separators=_JSON_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
        default=json_default,
    )


def _replace_non_finite(payload: object) -> object:
    """Map NaN and infinite floats to None at any nesting depth."""
    if _is_non_finite(payload):
        return None
    if isinstance(payload, dict):
        return {key: _replace_non_finite(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_replace_non_finite(value) for value in payload]
    return payload


def _is_non_finite(value: object) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def json_default(value: object) -> object:
    """Encode values the json module cannot, dates as ISO-8601 strings."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)
