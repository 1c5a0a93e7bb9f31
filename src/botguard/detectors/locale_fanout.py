"""Detection rule for access fanning out across storefront locales."""

from __future__ import annotations

from typing import Any

from botguard.detectors.base import BaseDetector
from botguard.locale import parse_locale
from botguard.scoring.models import DetectionResult, ReputationState, Signal

AXES = ("country", "language")


class LocaleFanoutDetector(BaseDetector):
    """Detects identities hopping between regional storefronts.

    A shopper browses one regional site; price and stock scrapers sweep
    the same catalogue across every locale within seconds. Each visited
    locale is remembered for a short window, and the rule triggers when the
    number of distinct countries (or languages, depending on ``axis``)
    reaches the threshold. The remembered locales are cleared on a
    violation so the next access starts a fresh window.

    ``multi_language_countries`` maps a country to the languages its own
    visitors legitimately switch between (e.g., ``{"ch": ["de", "fr",
    "it"]}``). When every visited language is allowed for the caller's
    country, the violation is suppressed and the window is kept.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        super().__init__(config)
        self._window_length = self._window(10)
        self._threshold = self.config.get("threshold", 2)
        self._axis = self.config.get("axis", "country")
        if self._axis not in AXES:
            raise ValueError(f"Unknown locale fanout axis: {self._axis}. Use one of {AXES}.")
        self._multi_language = {
            country.lower(): {lang.lower() for lang in langs}
            for country, langs in (self.config.get("multi_language_countries") or {}).items()
        }

    @property
    def rule_id(self) -> str:
        return "BG-003"

    @property
    def rule_name(self) -> str:
        return "Locale Fanout"

    @property
    def category(self) -> str:
        return "locale_fanout"

    def detect(self, state: ReputationState, signal: Signal) -> DetectionResult:
        now = signal.timestamp
        regions = {
            key: seen for key, seen in state.locale_regions.items()
            if now - seen <= self._window_length
        }

        locale = parse_locale(signal.path)
        if not locale.is_known:
            # Pruned, but not counted
            state.locale_regions = regions
            return self._result(False, len(self._distinct(regions)), locale=locale.key)

        regions[locale.key] = now
        distinct = self._distinct(regions)

        if self._allow_listed(signal.country, regions):
            state.locale_regions = regions
            return self._result(
                False, len(distinct), locale=locale.key, multi_lang_rule=True,
            )

        violation = len(distinct) >= self._threshold
        state.locale_regions = {} if violation else regions

        return self._result(
            violation,
            len(distinct),
            locale=locale.key,
            axis=self._axis,
            threshold=self._threshold,
            visited=sorted(distinct),
        )

    def _distinct(self, regions: dict) -> set[str]:
        index = 1 if self._axis == "country" else 0
        return {key.split("-", 1)[index] for key in regions}

    def _allow_listed(self, country: str | None, regions: dict) -> bool:
        if not country:
            return False
        allowed = self._multi_language.get(country.lower())
        if not allowed:
            return False
        languages = {key.split("-", 1)[0] for key in regions}
        return languages <= allowed
