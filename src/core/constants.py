"""Core constants used across Accrual modules.

This module centralizes column names, export formats, and defaults.
Keeping values here avoids magic literals in store logic.
"""

from __future__ import annotations

DEFAULT_ID_COLUMNS = ("id", "participant", "participant_id")
DEFAULT_METADATA_COLUMNS = (
    *DEFAULT_ID_COLUMNS,
    "sender",
    "sender_type",
    "sender_id",
    "timestamp",
    "meta",
)
SENDER_COLUMN = "sender"
PRIVATE_COLUMN_PREFIX = "_"
DEFAULT_CSV_SEPARATOR = ","
DEFAULT_FILENAME_PREFIX = "study"
DEFAULT_FILENAME_EXTENSION = "csv"
FILENAME_SEGMENT_SEPARATOR = "--"
FILENAME_DATE_FORMAT = "%Y-%m-%d--%H-%M-%S"
DEFAULT_EXPORT_FORMAT = "csv"
SUPPORTED_EXPORT_FORMATS = ("csv", "json", "jsonl")
EXPORT_MIME_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "jsonl": "application/jsonl",
}
EXPORT_TEXT_ENCODING = "utf-8"
SESSION_DATA_KEY = "data"
SESSION_STATE_KEY = "state"
CSV_FORBIDDEN_SEPARATOR_CHARS = ('"', "\r", "\n")
