"""Reputation engine: score decay, threshold classification, and strikes."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

from botguard.scoring.models import EnforcementAction, ReputationState


# Default score added per violation category
DEFAULT_WEIGHTS: dict[str, float] = {
    "rate_limit": 15.0,
    "path_diversity": 20.0,
    "locale_fanout": 20.0,
    "locale_burst": 15.0,
    "explicit_violation": 25.0,
}

DEFAULT_CHALLENGE_THRESHOLD = 40.0
DEFAULT_BLOCK_THRESHOLD = 70.0


class ReputationEngine:
    """Owns the numeric score of an identity and turns it into an action.

    Each update first decays the score by whole elapsed intervals, then
    adds the delta and classifies the result:

    - score < challenge: ALLOW
    - challenge <= score < block: CHALLENGE
    - score >= block: TEMP_BLOCK the first time, PERMANENT_BLOCK after that

    A PERMANENT_BLOCK is latched on the state and survives later decay.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        config = config or {}
        scoring_config = config.get("scoring", {})
        thresholds = scoring_config.get("thresholds", {})
        self._challenge_threshold = float(
            thresholds.get("challenge", DEFAULT_CHALLENGE_THRESHOLD)
        )
        self._block_threshold = float(thresholds.get("block", DEFAULT_BLOCK_THRESHOLD))

        decay = scoring_config.get("decay", {})
        self._decay_per_interval = float(decay.get("per_interval", 1.0))
        self._decay_interval = timedelta(seconds=decay.get("interval_seconds", 60))

        self._weights = {**DEFAULT_WEIGHTS, **scoring_config.get("weights", {})}

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    def delta_for(self, categories: Iterable[str]) -> float:
        """Sum the configured weight of each violated category."""
        return sum(self._weights.get(category, 0.0) for category in categories)

    def apply(
        self,
        state: ReputationState,
        delta: float,
        now: datetime,
        overrides: dict[str, Any] | None = None,
    ) -> EnforcementAction:
        """Decay, add ``delta`` and classify. Mutates ``state`` in place.

        Args:
            state: Working copy of the identity's state.
            delta: Score to add after decay.
            now: Current time.
            overrides: Optional per-call ``{"thresholds": {...}}`` values.

        Returns:
            The enforcement action for the updated score.
        """
        self.decay(state, now)
        state.score = max(0.0, state.score + delta)

        challenge, block = self._thresholds(overrides)
        return self._escalate(state, challenge, block)

    def decay(self, state: ReputationState, now: datetime) -> None:
        """Subtract one decay step per whole elapsed interval, floored at 0."""
        intervals = (now - state.last_updated) // self._decay_interval
        if intervals > 0:
            state.score = max(0.0, state.score - intervals * self._decay_per_interval)
        state.last_updated = now

    @staticmethod
    def action_for_score(
        score: float,
        challenge: float = DEFAULT_CHALLENGE_THRESHOLD,
        block: float = DEFAULT_BLOCK_THRESHOLD,
    ) -> EnforcementAction:
        """Classify a score without touching strike history."""
        if score >= block:
            return EnforcementAction.TEMP_BLOCK
        elif score >= challenge:
            return EnforcementAction.CHALLENGE
        return EnforcementAction.ALLOW

    def _thresholds(self, overrides: dict[str, Any] | None) -> tuple[float, float]:
        thresholds = (overrides or {}).get("thresholds") or {}
        challenge = thresholds.get("challenge")
        block = thresholds.get("block")
        return (
            float(challenge) if challenge is not None else self._challenge_threshold,
            float(block) if block is not None else self._block_threshold,
        )

    def _escalate(
        self,
        state: ReputationState,
        challenge: float,
        block: float,
    ) -> EnforcementAction:
        if state.permanently_blocked:
            return EnforcementAction.PERMANENT_BLOCK

        action = self.action_for_score(state.score, challenge, block)
        if action != EnforcementAction.TEMP_BLOCK:
            return action

        if state.has_strike:
            state.permanently_blocked = True
            return EnforcementAction.PERMANENT_BLOCK

        state.has_strike = True
        return EnforcementAction.TEMP_BLOCK
