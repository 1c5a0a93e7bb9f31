"""Request bodies accepted by the tracker API."""

from __future__ import annotations

from pydantic import Field

from botguard.scoring.models import CamelModel


class PathRequest(CamelModel):
    path: str
    # Country the edge resolved for the client, used by the multi-language rule
    country: str | None = None


class ThresholdOverrides(CamelModel):
    challenge: float | None = None
    block: float | None = None


class ScoreConfig(CamelModel):
    """Per-call scoring overrides for update-score."""

    thresholds: ThresholdOverrides | None = None


class ScoreRequest(CamelModel):
    score_to_add: float
    config: ScoreConfig | None = None


class ResetResponse(CamelModel):
    reset: bool
    existed: bool = Field(default=False)
