"""Pydantic data models for reputation state, signals, and decisions."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Zero value for window timestamps that have never been set
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model that serializes to camelCase JSON and accepts either form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnforcementAction(str, Enum):
    """What the caller should do with the identity's request."""

    ALLOW = "ALLOW"
    CHALLENGE = "CHALLENGE"
    TEMP_BLOCK = "TEMP_BLOCK"
    PERMANENT_BLOCK = "PERMANENT_BLOCK"


class RateWindow(CamelModel):
    """Fixed request-count window."""

    count: int = 0
    window_start: datetime = EPOCH


class PathVisit(CamelModel):
    path: str
    timestamp: datetime


class LocaleBurst(CamelModel):
    """Consecutive hits on one locale within a short window."""

    count: int = 0
    first_access: datetime = EPOCH
    locale: str = ""


class ReputationState(CamelModel):
    """Everything tracked for one identity.

    Created lazily with zero values on the first signal and mutated only
    while the identity's store lock is held.
    """

    score: float = Field(default=0.0, ge=0.0)
    last_updated: datetime = EPOCH
    has_strike: bool = False
    permanently_blocked: bool = False
    violation_count: int = 0
    rate_window: RateWindow = Field(default_factory=RateWindow)
    locale_regions: dict[str, datetime] = Field(default_factory=dict)
    path_history: list[PathVisit] = Field(default_factory=list)
    single_locale_burst: LocaleBurst = Field(default_factory=LocaleBurst)


class Signal(CamelModel):
    """One inbound observation for an identity."""

    timestamp: datetime = Field(default_factory=utcnow)
    path: str = "/"
    # Country the caller declared for the request (e.g., from geo-IP)
    country: str | None = None


class DetectionResult(CamelModel):
    """Outcome of running a single detector against one signal."""

    rule_id: str
    rule_name: str
    category: str
    violation: bool = False
    count: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)


class ViolationRecord(CamelModel):
    count: int
    status: str
    ttl_seconds: int | None = None
    action: EnforcementAction


class LocaleCheck(CamelModel):
    violation: bool
    count: int
    burst: bool = False
    multi_lang_rule: bool = False
    action: EnforcementAction


class BehaviorReport(CamelModel):
    count: int
    request_count: int
    unique_paths: int
    violations: dict[str, bool] = Field(default_factory=dict)
    action: EnforcementAction


class RateLimitDecision(CamelModel):
    allowed: bool
    count: int
    action: EnforcementAction


class ScoreUpdate(CamelModel):
    new_score: float
    action: EnforcementAction


class Decision(CamelModel):
    """Combined verdict from every detector and one reputation update."""

    action: EnforcementAction
    score: float
    violations: dict[str, bool] = Field(default_factory=dict)
    counters: dict[str, int] = Field(default_factory=dict)
