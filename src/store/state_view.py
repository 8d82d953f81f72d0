"""Typed dynamic-key access to store state.

Consumers that do not know column names in advance read and write the
state through this view instead of touching the store internals.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from store.data_store import DataStore


class StateView(Mapping[str, Any]):
    """Read state, write through ``DataStore.set``.

    Reads reflect the store's most recently set value per column. Writes
    land in both staging and state and emit ``set``, exactly like calling
    ``store.set`` directly.
    """

    def __init__(self, store: "DataStore") -> None:
        self._store = store

    def get(self, key: str, default: Any = None) -> Any:
        if self._store.has(key):
            return self._store.get(key)
        return default

    def has(self, key: str) -> bool:
        return self._store.has(key)

    def keys(self) -> list[str]:  # type: ignore[override]
        return self._store.state_keys()

    def set_many(self, values: Mapping[str, Any]) -> None:
        self._store.set(values)

    def __getitem__(self, key: str) -> Any:
        if not self._store.has(key):
            raise KeyError(key)
        return self._store.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._store.set(key, value)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._store.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.state_keys())

    def __len__(self) -> int:
        return len(self._store.state_keys())

    def __repr__(self) -> str:
        return f"StateView({dict(self.items())!r})"
