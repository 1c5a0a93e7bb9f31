"""Event sinks for detection and enforcement events.

The tracker reports what it saw (violations, score changes, blocks,
resets) through an injected sink rather than logging directly, so the
detection logic stays silent in tests and can be routed elsewhere in
production.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger("botguard.events")


class EventSink(ABC):
    """Receives structured events emitted by the tracker."""

    @abstractmethod
    def emit(self, event: str, identity: str, **fields: Any) -> None:
        """Record a single event.

        Args:
            event: Event name (e.g., 'violation', 'block').
            identity: The identity the event concerns.
            **fields: Event-specific key/value data.
        """
        ...


class LoggingEventSink(EventSink):
    """Writes events as key=value log lines."""

    # Events that indicate enforcement rather than bookkeeping
    WARNING_EVENTS = frozenset({"violation", "block"})

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def emit(self, event: str, identity: str, **fields: Any) -> None:
        level = logging.WARNING if event in self.WARNING_EVENTS else logging.INFO
        details = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        self._log.log(level, "[%s] identity=%s %s", event.upper(), identity, details)


class NullEventSink(EventSink):
    """Discards every event."""

    def emit(self, event: str, identity: str, **fields: Any) -> None:
        return None
