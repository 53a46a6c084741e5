"""Event sink adapters - Notification delivery implementations."""

from .console import ConsoleEventSink
from .outbox import InMemoryEventOutbox

__all__ = ["ConsoleEventSink", "InMemoryEventOutbox"]
