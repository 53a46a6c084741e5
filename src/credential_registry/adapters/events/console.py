"""
Console event sink adapter - Implements EventSink protocol.

This module provides a console-based implementation of the domain's
event sink port, logging registry notifications for demo purposes.
"""

import logging
from dataclasses import asdict

from credential_registry.domain.ports import RegistryEvent

logger = logging.getLogger(__name__)


class ConsoleEventSink:
    """
    Implements EventSink protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - in production a message broker or
    indexer adapter receives the notifications instead.
    """

    def publish(self, event: RegistryEvent) -> None:
        """
        Log a notification at INFO level.

        Format: [EVENT] <Name> key=value key=value ...
        """
        fields = " ".join(f"{key}={value}" for key, value in asdict(event).items() if key != "name")
        logger.info("[EVENT] %s %s", event.name, fields)
