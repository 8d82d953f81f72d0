"""Public SDK surface for Accrual.

This module provides a stable import path for experiment runners.
It re-exports the data store, its collaborators, and typed models.
"""

from __future__ import annotations

from core.config import AccrualConfig
from core.errors import (
    AccrualConfigError,
    AccrualDependencyError,
    AccrualError,
    AccrualExportError,
    AccrualInvalidArgumentError,
    AccrualSessionError,
    AccrualUnsupportedFormatError,
)
from core.types import ExportBlob, ExportFormat, Row, SessionSnapshot, Table
from store.data_store import DataStore
from store.events import EventChannel, EventEmitter
from store.session_io import read_session_file, write_session_file
from store.state_view import StateView

__all__ = [
    "AccrualConfig",
    "AccrualConfigError",
    "AccrualDependencyError",
    "AccrualError",
    "AccrualExportError",
    "AccrualInvalidArgumentError",
    "AccrualSessionError",
    "AccrualUnsupportedFormatError",
    "DataStore",
    "EventChannel",
    "EventEmitter",
    "ExportBlob",
    "ExportFormat",
    "Row",
    "SessionSnapshot",
    "StateView",
    "Table",
    "read_session_file",
    "write_session_file",
]
