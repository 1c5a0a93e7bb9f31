"""Detection rule for the number of distinct paths crawled in a short window."""

from __future__ import annotations

from typing import Any

from botguard.detectors.base import BaseDetector
from botguard.scoring.models import DetectionResult, PathVisit, ReputationState, Signal


class PathDiversityDetector(BaseDetector):
    """Detects identities touching many distinct pages in quick succession.

    Human shoppers revisit a handful of pages; catalogue scrapers walk
    through a new URL on every request. Triggers when the number of
    distinct paths seen inside the window exceeds the threshold.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        super().__init__(config)
        self._window_length = self._window(30)
        self._max_unique = self.config.get("max_unique_paths", 15)

    @property
    def rule_id(self) -> str:
        return "BG-002"

    @property
    def rule_name(self) -> str:
        return "Path Diversity"

    @property
    def category(self) -> str:
        return "path_diversity"

    def detect(self, state: ReputationState, signal: Signal) -> DetectionResult:
        now = signal.timestamp

        # One entry per path, holding its latest visit
        history = [
            visit for visit in state.path_history
            if visit.path != signal.path and now - visit.timestamp < self._window_length
        ]
        history.append(PathVisit(path=signal.path, timestamp=now))
        # Past max_unique + 1 distinct paths the verdict cannot change
        history = history[-(self._max_unique + 1):]
        state.path_history = history

        unique_paths = len({visit.path for visit in history})
        return self._result(
            unique_paths > self._max_unique,
            unique_paths,
            threshold=self._max_unique,
            window_entries=len(history),
        )
