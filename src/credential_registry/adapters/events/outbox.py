"""
In-memory event outbox adapter - Implements EventSink protocol.

Collects published notifications in order so a downstream indexer can
drain them. Also used by tests to assert which notifications a
transition produced.
"""

import threading

from credential_registry.domain.ports import RegistryEvent


class InMemoryEventOutbox:
    """
    Implements EventSink protocol with an append-only list.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[RegistryEvent] = []

    def publish(self, event: RegistryEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[RegistryEvent]:
        """Snapshot of the published notifications in publication order."""
        with self._lock:
            return list(self._events)

    def drain(self) -> list[RegistryEvent]:
        """Return and remove all pending notifications."""
        with self._lock:
            drained, self._events = self._events, []
            return drained
