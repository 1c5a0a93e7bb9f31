"""Per-identity decision composer.

Every operation runs under the identity's exclusive store lock:
load state, run the detectors for the signal, fold violations into a
score delta, update the reputation once, persist, and only then hand the
result back. A failed save raises StoreError and no result is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from botguard.detectors import (
    LocaleBurstDetector,
    LocaleFanoutDetector,
    PathDiversityDetector,
    RateDetector,
)
from botguard.escalation import block_status
from botguard.events import EventSink, LoggingEventSink
from botguard.scoring.engine import ReputationEngine
from botguard.scoring.models import (
    BehaviorReport,
    Decision,
    DetectionResult,
    EnforcementAction,
    LocaleCheck,
    RateLimitDecision,
    ReputationState,
    ScoreUpdate,
    Signal,
    ViolationRecord,
    utcnow,
)
from botguard.storage.base import IdentityStore

Clock = Callable[[], datetime]
Outbox = list[tuple[str, dict[str, Any]]]

BLOCK_ACTIONS = (EnforcementAction.TEMP_BLOCK, EnforcementAction.PERMANENT_BLOCK)


class IdentityTracker:
    """Stateful abuse scoring for identities (network addresses or fingerprints)."""

    def __init__(
        self,
        store: IdentityStore,
        config: dict[str, Any] | None = None,
        sink: EventSink | None = None,
        clock: Clock | None = None,
    ):
        config = config or {}
        detector_config = config.get("detectors", {})

        self._store = store
        self._sink = sink or LoggingEventSink()
        self._clock = clock or utcnow
        self._engine = ReputationEngine(config)
        self._escalation_config = config.get("escalation", {})

        self._rate = RateDetector(detector_config.get("rate_limit", {}))
        self._paths = PathDiversityDetector(detector_config.get("path_diversity", {}))
        self._fanout = LocaleFanoutDetector(detector_config.get("locale_fanout", {}))
        self._burst = LocaleBurstDetector(detector_config.get("locale_burst", {}))

    @property
    def store(self) -> IdentityStore:
        return self._store

    # -- operations --

    def record_violation(self, identity: str) -> ViolationRecord:
        """Count an explicit violation reported by the caller."""
        with self._session(identity) as (state, now, outbox):
            state.violation_count += 1
            outbox.append(("violation", {"rule": "explicit", "count": state.violation_count}))
            action = self._settle(outbox, state, now, ["explicit_violation"])
            status = block_status(state.violation_count, self._escalation_config)

        return ViolationRecord(
            count=state.violation_count,
            status=status.status,
            ttl_seconds=status.ttl_seconds,
            action=action,
        )

    def check_locale(
        self,
        identity: str,
        path: str,
        country: str | None = None,
    ) -> LocaleCheck:
        """Run the locale fanout and single-locale burst rules for one path."""
        with self._session(identity) as (state, now, outbox):
            signal = Signal(timestamp=now, path=path, country=country)
            fanout = self._fanout.detect(state, signal)
            burst = self._burst.detect(state, signal)
            action = self._settle(
                outbox, state, now, self._record(outbox, state, [fanout, burst]),
            )

        return LocaleCheck(
            violation=fanout.violation,
            count=fanout.count,
            burst=burst.violation,
            multi_lang_rule=fanout.metadata.get("multi_lang_rule", False),
            action=action,
        )

    def track_behavior(self, identity: str, path: str) -> BehaviorReport:
        """Run the request rate and path diversity rules for one request."""
        with self._session(identity) as (state, now, outbox):
            signal = Signal(timestamp=now, path=path)
            rate = self._rate.detect(state, signal)
            paths = self._paths.detect(state, signal)
            action = self._settle(
                outbox, state, now, self._record(outbox, state, [rate, paths]),
            )

        return BehaviorReport(
            count=state.violation_count,
            request_count=rate.count,
            unique_paths=paths.count,
            violations={rate.category: rate.violation, paths.category: paths.violation},
            action=action,
        )

    def rate_limit(self, identity: str) -> RateLimitDecision:
        with self._session(identity) as (state, now, outbox):
            rate = self._rate.detect(state, Signal(timestamp=now))
            action = self._settle(
                outbox, state, now, self._record(outbox, state, [rate]),
            )

        return RateLimitDecision(allowed=not rate.violation, count=rate.count, action=action)

    def update_score(
        self,
        identity: str,
        score_to_add: float,
        overrides: dict[str, Any] | None = None,
    ) -> ScoreUpdate:
        """Add an externally computed score and classify the result.

        ``overrides`` may carry ``{"thresholds": {"challenge": .., "block": ..}}``
        for this call only.
        """
        with self._session(identity) as (state, now, outbox):
            action = self._engine.apply(state, score_to_add, now, overrides)
            outbox.append(("score", {"added": score_to_add, "score": state.score}))
            self._report_block(outbox, state, action)

        return ScoreUpdate(new_score=state.score, action=action)

    def inspect(
        self,
        identity: str,
        path: str,
        country: str | None = None,
    ) -> Decision:
        """Run every detector for one request and update the reputation once."""
        with self._session(identity) as (state, now, outbox):
            signal = Signal(timestamp=now, path=path, country=country)
            results = [
                self._rate.detect(state, signal),
                self._paths.detect(state, signal),
                self._fanout.detect(state, signal),
                self._burst.detect(state, signal),
            ]
            action = self._settle(
                outbox, state, now, self._record(outbox, state, results),
            )

        return Decision(
            action=action,
            score=state.score,
            violations={r.category: r.violation for r in results},
            counters={
                "violationCount": state.violation_count,
                **{r.category: r.count for r in results},
            },
        )

    def get_state(self, identity: str) -> ReputationState:
        with self._store.exclusive(identity):
            return self._store.load(identity)

    def reset_state(self, identity: str) -> bool:
        with self._store.exclusive(identity):
            removed = self._store.delete(identity)
        self._sink.emit("reset", identity, removed=removed)
        return removed

    # -- helpers --

    @contextmanager
    def _session(self, identity: str) -> Iterator[tuple[ReputationState, datetime, Outbox]]:
        """Load a working copy under the identity lock and save it on success.

        Events queued in the outbox reach the sink only after the save, so
        a failed write never leaves a logged violation or block behind.
        """
        outbox: Outbox = []
        with self._store.exclusive(identity):
            state = self._store.load(identity)
            yield state, self._clock(), outbox
            self._store.save(identity, state)

        for event, fields in outbox:
            self._sink.emit(event, identity, **fields)

    def _record(
        self,
        outbox: Outbox,
        state: ReputationState,
        results: list[DetectionResult],
    ) -> list[str]:
        """Queue and count violations; return the violated categories."""
        violated: list[str] = []
        for result in results:
            if not result.violation:
                continue
            violated.append(result.category)
            outbox.append((
                "violation",
                {"rule": result.rule_id, "category": result.category, "count": result.count},
            ))
        state.violation_count += len(violated)
        return violated

    def _settle(
        self,
        outbox: Outbox,
        state: ReputationState,
        now: datetime,
        categories: list[str],
    ) -> EnforcementAction:
        delta = self._engine.delta_for(categories)
        action = self._engine.apply(state, delta, now)
        if delta:
            outbox.append((
                "score",
                {"added": delta, "score": state.score, "categories": ",".join(categories)},
            ))
        self._report_block(outbox, state, action)
        return action

    def _report_block(
        self,
        outbox: Outbox,
        state: ReputationState,
        action: EnforcementAction,
    ) -> None:
        if action in BLOCK_ACTIONS:
            outbox.append(("block", {"action": action.value, "score": state.score}))
