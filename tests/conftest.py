"""Shared fixtures: a controllable clock, an event recorder, and a tracker."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from botguard.events import EventSink
from botguard.storage.memory import MemoryStore
from botguard.tracker import IdentityTracker

BASE_TIME = datetime(2026, 2, 20, 10, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingSink(EventSink):
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def emit(self, event: str, identity: str, **fields: Any) -> None:
        self.events.append((event, identity, fields))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def tracker(store, sink, clock) -> IdentityTracker:
    return IdentityTracker(store, sink=sink, clock=clock)
