"""Offline replay of recorded request signals through a fresh tracker."""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator

from botguard.events import EventSink, NullEventSink
from botguard.scoring.models import EPOCH, CamelModel, Decision, EnforcementAction
from botguard.storage.memory import MemoryStore
from botguard.tracker import IdentityTracker


class SignalRecord(CamelModel):
    """One line of a replay file."""

    identity: str
    timestamp: datetime
    path: str = "/"
    country: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ReplayEntry(CamelModel):
    record: SignalRecord
    decision: Decision


class ReplayResult(CamelModel):
    entries: list[ReplayEntry] = Field(default_factory=list)
    final_actions: dict[str, EnforcementAction] = Field(default_factory=dict)

    @property
    def action_counts(self) -> Counter[str]:
        return Counter(entry.decision.action.value for entry in self.entries)


class ReplayClock:
    """Clock whose time is set by the replay loop."""

    def __init__(self) -> None:
        self.now = EPOCH

    def __call__(self) -> datetime:
        return self.now


def read_signals(path: str | Path) -> list[SignalRecord]:
    """Parse a JSON Lines file; blank lines and ``#`` comments are skipped."""
    records: list[SignalRecord] = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                records.append(SignalRecord.model_validate(json.loads(line)))
            except ValueError as e:
                raise ValueError(f"{path}:{line_number}: invalid signal: {e}") from e
    return records


def replay(
    records: list[SignalRecord],
    config: dict[str, Any] | None = None,
    sink: EventSink | None = None,
) -> ReplayResult:
    """Feed records, in time order, through an in-memory tracker."""
    clock = ReplayClock()
    tracker = IdentityTracker(MemoryStore(), config, sink=sink or NullEventSink(), clock=clock)

    result = ReplayResult()
    for record in sorted(records, key=lambda r: r.timestamp):
        clock.now = record.timestamp
        decision = tracker.inspect(record.identity, record.path, record.country)
        result.entries.append(ReplayEntry(record=record, decision=decision))
        result.final_actions[record.identity] = decision.action

    return result
