"""Session payload serialization.

This module converts stores to and from the ``{data, state}`` session
document so persisted experiment sessions can be restored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.constants import SESSION_DATA_KEY, SESSION_STATE_KEY
from core.errors import AccrualSessionError
from core.types import SessionSnapshot
from store.export_formats import json_default


def session_to_payload(snapshot: SessionSnapshot) -> dict[str, object]:
    """Serialize a session snapshot into a JSON-safe dictionary."""
    return {SESSION_DATA_KEY: snapshot.data, SESSION_STATE_KEY: snapshot.state}


def session_from_payload(payload: Mapping[str, Any]) -> SessionSnapshot:
    """Validate and build a session snapshot from a decoded payload.

    Args:
        payload: Decoded session document.

    Returns:
        Session snapshot; missing sections default to empty.

    Raises:
        AccrualSessionError: If sections have the wrong structure.
    """
    data = payload.get(SESSION_DATA_KEY, [])
    state = payload.get(SESSION_STATE_KEY, {})
    if not isinstance(data, list):
        raise AccrualSessionError(
            f"Invalid session payload: '{SESSION_DATA_KEY}' must be a list of rows, "
            f"got {type(data).__name__}."
        )
    for index, row in enumerate(data):
        if not isinstance(row, dict):
            raise AccrualSessionError(
                f"Invalid session payload: row {index} must be an object, "
                f"got {type(row).__name__}."
            )
    if not isinstance(state, dict):
        raise AccrualSessionError(
            f"Invalid session payload: '{SESSION_STATE_KEY}' must be an object, "
            f"got {type(state).__name__}."
        )
    return SessionSnapshot(data=data, state=state)


def write_session_file(session_path: Path, snapshot: SessionSnapshot) -> None:
    """Write a session snapshot as a JSON document.

    Raises:
        AccrualSessionError: If the file cannot be written.
    """
    text = json.dumps(session_to_payload(snapshot), indent=2, default=json_default)
    try:
        session_path.write_text(text + "\n", encoding="utf-8")
    except OSError as error:
        raise AccrualSessionError(
            f"Failed to write session at {session_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def read_session_file(session_path: Path) -> SessionSnapshot:
    """Read a session snapshot from a JSON document.

    Raises:
        AccrualSessionError: If the file is missing, unreadable, or malformed.
    """
    if not session_path.exists():
        raise AccrualSessionError(
            f"Session file not found at {session_path}. Provide a saved session path."
        )
    try:
        text = session_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise AccrualSessionError(
            f"Failed to read session at {session_path}: {error}. "
            "Check that the path is a readable UTF-8 JSON file."
        ) from error
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise AccrualSessionError(
            f"Failed to parse session at {session_path}: {error.msg} (line {error.lineno})."
        ) from error
    if not isinstance(payload, dict):
        raise AccrualSessionError(
            f"Failed to parse session at {session_path}: expected JSON object at top level."
        )
    return session_from_payload(payload)
