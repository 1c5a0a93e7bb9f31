"""Reputation engine and data models for per-identity scoring."""

from botguard.scoring.engine import ReputationEngine
from botguard.scoring.models import (
    Decision,
    DetectionResult,
    EnforcementAction,
    ReputationState,
    Signal,
)

__all__ = [
    "ReputationEngine",
    "Decision",
    "DetectionResult",
    "EnforcementAction",
    "ReputationState",
    "Signal",
]
