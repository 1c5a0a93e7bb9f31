"""Abstract base class for signal detectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

from botguard.scoring.models import DetectionResult, ReputationState, Signal


class BaseDetector(ABC):
    """Abstract detector interface for one behavioral signal.

    Each detector owns a slice of the identity's ReputationState. It prunes
    that slice to its window, folds in the incoming signal, and reports
    whether the identity crossed the detector's threshold. Detectors only
    touch their own slice of the working state they are handed.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique identifier for this detection rule."""
        ...

    @property
    @abstractmethod
    def rule_name(self) -> str:
        """Human-readable name for this detection rule."""
        ...

    @property
    @abstractmethod
    def category(self) -> str:
        """Category key used for scoring weights (e.g., 'rate_limit')."""
        ...

    @abstractmethod
    def detect(self, state: ReputationState, signal: Signal) -> DetectionResult:
        """Evaluate one signal against the identity's windowed state.

        Args:
            state: Working copy of the identity's state; the detector's
                slice is updated in place.
            signal: The inbound observation, carrying the current time.

        Returns:
            DetectionResult with the violation flag and the window count.
        """
        ...

    def _window(self, default_seconds: float) -> timedelta:
        return timedelta(seconds=self.config.get("window_seconds", default_seconds))

    def _result(self, violation: bool, count: int, **metadata: Any) -> DetectionResult:
        return DetectionResult(
            rule_id=self.rule_id,
            rule_name=self.rule_name,
            category=self.category,
            violation=violation,
            count=count,
            metadata=metadata,
        )
