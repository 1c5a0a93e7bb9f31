"""Detection rule for repeated hits on a single locale by flagged identities."""

from __future__ import annotations

from typing import Any

from botguard.detectors.base import BaseDetector
from botguard.locale import parse_locale
from botguard.scoring.models import DetectionResult, LocaleBurst, ReputationState, Signal


class LocaleBurstDetector(BaseDetector):
    """Detects hammering of one locale by an identity that already misbehaved.

    Only identities with at least one recorded violation are tracked, so
    ordinary shoppers refreshing a page are never counted. The burst window
    restarts whenever the locale changes or the window expires; more than
    N hits inside it is a violation and clears the burst.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        super().__init__(config)
        self._window_length = self._window(5)
        self._max_requests = self.config.get("max_requests", 3)

    @property
    def rule_id(self) -> str:
        return "BG-004"

    @property
    def rule_name(self) -> str:
        return "Single-Locale Burst"

    @property
    def category(self) -> str:
        return "locale_burst"

    def applies_to(self, state: ReputationState) -> bool:
        return state.violation_count > 0

    def detect(self, state: ReputationState, signal: Signal) -> DetectionResult:
        if not self.applies_to(state):
            return self._result(False, 0, skipped=True)

        now = signal.timestamp
        key = parse_locale(signal.path).key
        burst = state.single_locale_burst

        if burst.locale != key or now - burst.first_access > self._window_length:
            burst = LocaleBurst(count=1, first_access=now, locale=key)
        else:
            burst.count += 1

        violation = burst.count > self._max_requests
        state.single_locale_burst = LocaleBurst() if violation else burst

        return self._result(violation, burst.count, locale=key, limit=self._max_requests)
