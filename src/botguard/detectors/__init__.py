"""Signal detectors that turn per-identity windows into violations."""

from botguard.detectors.base import BaseDetector
from botguard.detectors.locale_burst import LocaleBurstDetector
from botguard.detectors.locale_fanout import LocaleFanoutDetector
from botguard.detectors.path_diversity import PathDiversityDetector
from botguard.detectors.rate_limit import RateDetector

ALL_DETECTORS: list[type[BaseDetector]] = [
    RateDetector,
    PathDiversityDetector,
    LocaleFanoutDetector,
    LocaleBurstDetector,
]

__all__ = [
    "BaseDetector",
    "RateDetector",
    "PathDiversityDetector",
    "LocaleFanoutDetector",
    "LocaleBurstDetector",
    "ALL_DETECTORS",
]
