"""Detection rule for request rate within a fixed window."""

from __future__ import annotations

from typing import Any

from botguard.detectors.base import BaseDetector
from botguard.scoring.models import DetectionResult, RateWindow, ReputationState, Signal


class RateDetector(BaseDetector):
    """Counts requests in a fixed window that restarts once it has elapsed.

    Triggers when an identity makes more than N requests before the window
    that started with its first counted request runs out. The updated
    window is kept whether or not the request violates the limit.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        super().__init__(config)
        self._window_length = self._window(60)
        self._max_requests = self.config.get("max_requests", 10)

    @property
    def rule_id(self) -> str:
        return "BG-001"

    @property
    def rule_name(self) -> str:
        return "Request Rate"

    @property
    def category(self) -> str:
        return "rate_limit"

    def detect(self, state: ReputationState, signal: Signal) -> DetectionResult:
        now = signal.timestamp
        window = state.rate_window

        if now - window.window_start > self._window_length:
            window = RateWindow(count=0, window_start=now)

        window.count += 1
        state.rate_window = window

        return self._result(
            window.count > self._max_requests,
            window.count,
            limit=self._max_requests,
            window_start=window.window_start.isoformat(),
        )
