"""HTTP surface for the per-identity tracker."""

from botguard.api.server import create_app

__all__ = ["create_app"]
