"""Botguard -- per-identity abuse scoring for multi-locale storefronts."""

__version__ = "0.1.0"
