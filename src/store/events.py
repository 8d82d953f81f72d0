"""Observer channel for store notifications.

The store announces ``set``, ``commit``, ``update`` and ``clear`` through
an injected emitter. Listeners run synchronously inside the triggering
call and their exceptions propagate to that caller.
"""

from __future__ import annotations

from typing import Callable, Protocol

Listener = Callable[[], None]


class EventEmitter(Protocol):
    """Minimal contract the store requires from its event channel."""

    def emit(self, event: str) -> None:
        """Announce an event by name."""


class EventChannel:
    """Explicit listener registry implementing ``EventEmitter``."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for an event.

        Args:
            event: Event name.
            listener: Zero-argument callable run on each emit.
        """
        self._listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a previously registered listener, if present."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str) -> None:
        """Call every listener registered for ``event`` in order.

        Args:
            event: Event name.
        """
        # Snapshot so listeners may (un)register during dispatch.
        for listener in list(self._listeners.get(event, ())):
            listener()

    def listener_count(self, event: str) -> int:
        """Return the number of listeners registered for ``event``."""
        return len(self._listeners.get(event, ()))
