"""Unit tests for the typed state view."""

from __future__ import annotations

import pytest

from store.data_store import DataStore
from store.events import EventChannel


def test_state_view_reads_latest_values() -> None:
    """The view should expose state through get, has, keys, and indexing."""
    store = DataStore()
    store.set({"a": 1, "b": None})
    store.commit()

    state = store.state

    assert state.get("a") == 1
    assert state.has("b") and "b" in state
    assert state.keys() == ["a", "b"]
    assert state["a"] == 1 and len(state) == 2
    assert dict(state) == {"a": 1, "b": None}


def test_state_view_missing_key() -> None:
    """Missing keys should return defaults or raise KeyError when indexed."""
    state = DataStore().state

    assert state.get("missing") is None and state.get("missing", 0) == 0
    with pytest.raises(KeyError):
        state["missing"]


def test_state_view_writes_go_through_set() -> None:
    """Item assignment should update staging and state and emit set."""
    events = EventChannel()
    emitted: list[str] = []
    events.on("set", lambda: emitted.append("set"))
    store = DataStore(events=events)

    store.state["response"] = "left"
    store.state.set_many({"correct": True, "rt": 412})

    assert store.staging == {"response": "left", "correct": True, "rt": 412}
    assert store.get("rt") == 412
    assert emitted == ["set", "set"]


def test_state_view_is_live() -> None:
    """A view obtained earlier should reflect later writes and clears."""
    store = DataStore()
    state = store.state

    store.set("a", 1)
    assert list(state) == ["a"]
    store.clear()

    assert list(state) == []
