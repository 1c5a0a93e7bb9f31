"""HTTP client used by the edge to consult the tracker service."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from botguard.errors import TrackerUnavailable
from botguard.scoring.models import (
    BehaviorReport,
    Decision,
    EnforcementAction,
    LocaleCheck,
    RateLimitDecision,
    ScoreUpdate,
    ViolationRecord,
)

logger = logging.getLogger("botguard.client")

FAIL_POLICIES = {
    "open": EnforcementAction.ALLOW,
    "closed": EnforcementAction.TEMP_BLOCK,
}


class TrackerClient:
    """Calls the tracker API for one identity at a time.

    The raw operations raise TrackerUnavailable when the service cannot be
    reached or answers with a server error, since the decision of a failed
    call is never authoritative. ``decide()`` applies the configured
    failure policy instead: ``open`` lets the request through, ``closed``
    blocks it.

    Config keys (``client`` section):
    - base_url: Tracker service root URL
    - timeout_seconds: Per-call timeout
    - fail_policy: open or closed
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        session: requests.Session | None = None,
    ):
        config = config or {}
        self._base_url = config.get("base_url", "http://127.0.0.1:8787").rstrip("/")
        self._timeout = float(config.get("timeout_seconds", 2.0))
        policy = config.get("fail_policy", "open")
        if policy not in FAIL_POLICIES:
            raise ValueError(f"Unknown fail policy: {policy}. Use open or closed.")
        self._fail_action = FAIL_POLICIES[policy]
        self._session = session or requests.Session()

    @property
    def fail_action(self) -> EnforcementAction:
        return self._fail_action

    def record_violation(self, identity: str) -> ViolationRecord:
        return ViolationRecord.model_validate(self._post(identity, "record-violation"))

    def check_locale(
        self,
        identity: str,
        path: str,
        country: str | None = None,
    ) -> LocaleCheck:
        body = {"path": path, "country": country}
        return LocaleCheck.model_validate(self._post(identity, "check-locale", body))

    def track_behavior(self, identity: str, path: str) -> BehaviorReport:
        body = {"path": path}
        return BehaviorReport.model_validate(self._post(identity, "track-behavior", body))

    def rate_limit(self, identity: str) -> RateLimitDecision:
        return RateLimitDecision.model_validate(self._post(identity, "rate-limit"))

    def update_score(
        self,
        identity: str,
        score_to_add: float,
        config: dict[str, Any] | None = None,
    ) -> ScoreUpdate:
        body = {"scoreToAdd": score_to_add, "config": config}
        return ScoreUpdate.model_validate(self._post(identity, "update-score", body))

    def inspect(self, identity: str, path: str, country: str | None = None) -> Decision:
        body = {"path": path, "country": country}
        return Decision.model_validate(self._post(identity, "inspect", body))

    def decide(
        self,
        identity: str,
        path: str,
        country: str | None = None,
    ) -> EnforcementAction:
        """Return the action for a request, falling back to the fail policy."""
        try:
            return self.inspect(identity, path, country).action
        except TrackerUnavailable as e:
            logger.warning(
                "Tracker unavailable for %s, applying fail policy %s: %s",
                identity, self._fail_action.value, e,
            )
            return self._fail_action

    def _post(
        self,
        identity: str,
        operation: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}/trackers/{quote(identity, safe='')}/{operation}"
        try:
            response = self._session.post(url, json=body, timeout=self._timeout)
        except requests.RequestException as e:
            raise TrackerUnavailable(f"{operation} request failed: {e}") from e

        if response.status_code >= 500:
            raise TrackerUnavailable(
                f"{operation} returned HTTP {response.status_code}"
            )
        response.raise_for_status()
        return response.json()
