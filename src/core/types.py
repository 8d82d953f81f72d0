"""Shared typed models.

This module defines the row aliases and immutable value objects
passed between the store, its exporters, and session IO.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from core.constants import EXPORT_TEXT_ENCODING

Row = dict[str, Any]
Table = list[Row]
ExportFormat = Literal["csv", "json", "jsonl"]


@dataclass(frozen=True)
class SessionSnapshot:
    """Minimal persisted-session representation of a store.

    Attributes:
        data: Committed rows in insertion order.
        state: Most recently set value per column.
    """

    data: Table = field(default_factory=list)
    state: Row = field(default_factory=dict)


@dataclass(frozen=True)
class ExportBlob:
    """Binary export payload handed to download or storage collaborators.

    Attributes:
        content: Encoded export text.
        mime_type: Format-specific MIME type.
    """

    content: bytes
    mime_type: str

    @property
    def text(self) -> str:
        """Decoded export text."""
        return self.content.decode(EXPORT_TEXT_ENCODING)

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.content)
