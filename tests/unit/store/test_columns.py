"""Unit tests for column discovery."""

from __future__ import annotations

from core.config import AccrualConfig
from store.columns import discover_columns
from store.data_store import DataStore


def test_keys_orders_priority_then_alphabetical() -> None:
    """Prioritized columns should lead in priority order."""
    store = DataStore()
    store.hydrate([{"a": 1, "b": 2}, {"c": 3}], {})

    assert store.keys(True, ["b", "a"]) == ["b", "a", "c"]


def test_keys_uses_default_metadata_priority() -> None:
    """Default priority should bring id and sender columns forward."""
    store = DataStore()
    store.hydrate(
        [
            {"zeta": 1, "sender": "trial", "participant": "p1"},
            {"alpha": 2, "timestamp": "t", "_private": 0},
        ],
        {},
    )

    assert store.keys() == ["participant", "sender", "timestamp", "_private", "alpha", "zeta"]


def test_keys_include_state_adds_state_only_columns() -> None:
    """State-only columns should appear only when requested."""
    store = DataStore()
    store.set("a", 1)
    store.commit()
    store.set("pending", True)

    assert store.keys() == ["a"]
    assert store.keys(include_state=True) == ["a", "pending"]


def test_keys_is_idempotent_and_does_not_mutate_rows() -> None:
    """Recomputing keys should not change the table or the result."""
    rows = [{"b": 1, "a": 2}, {"a": 3}]
    snapshot = [dict(row) for row in rows]

    first = discover_columns(rows, ("a",))
    second = discover_columns(rows, ("a",))

    assert first == second == ["a", "b"]
    assert rows == snapshot


def test_priority_list_ignores_missing_and_duplicate_names() -> None:
    """Priority names absent from the data should not appear."""
    columns = discover_columns([{"x": 1, "id": 2}], ("meta", "id", "id"))

    assert columns == ["id", "x"]


def test_keys_follow_configured_priority() -> None:
    """A store built with a custom config should use its priority columns."""
    config = AccrualConfig(priority_columns=("trial",))
    store = DataStore(config=config)
    store.hydrate([{"id": 1, "trial": 4}], {})

    assert store.keys() == ["trial", "id"]
