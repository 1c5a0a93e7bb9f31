"""Configuration loading from environment variables and YAML files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "scoring": {
        # Score added per violation category
        "weights": {
            "rate_limit": 15.0,
            "path_diversity": 20.0,
            "locale_fanout": 20.0,
            "locale_burst": 15.0,
            "explicit_violation": 25.0,
        },
        "thresholds": {
            "challenge": 40,
            "block": 70,
        },
        "decay": {
            "per_interval": 1.0,
            "interval_seconds": 60,
        },
    },
    "detectors": {
        "rate_limit": {
            "window_seconds": 60,
            "max_requests": 10,
        },
        "path_diversity": {
            "window_seconds": 30,
            "max_unique_paths": 15,
        },
        "locale_fanout": {
            "window_seconds": 10,
            "threshold": 2,
            "axis": "country",
            "multi_language_countries": {},
        },
        "locale_burst": {
            "window_seconds": 5,
            "max_requests": 3,
        },
    },
    "escalation": {
        "ttl_seconds": [600, 1800, 86400],
    },
    "storage": {
        "backend": "memory",
    },
    "mongodb": {
        "collection": "reputation",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8787,
    },
    "client": {
        "base_url": "http://127.0.0.1:8787",
        "timeout_seconds": 2.0,
        "fail_policy": "open",
    },
}


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (BG_* prefix)
    2. YAML config file
    3. Default values
    """
    config = _deep_copy_dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                file_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, file_config)

    _apply_env_overrides(config)
    return config


def _apply_env_overrides(config: dict[str, Any]) -> None:
    """Apply environment variable overrides to config."""
    env_mappings = {
        "BG_RESET_KEY": ("server", "reset_key"),
        "BG_STORAGE_BACKEND": ("storage", "backend"),
        "BG_MONGO_URI": ("mongodb", "uri"),
        "BG_MONGO_DB": ("mongodb", "database"),
        "BG_TRACKER_URL": ("client", "base_url"),
        "BG_FAIL_POLICY": ("client", "fail_policy"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value:
            if section not in config:
                config[section] = {}
            config[section][key] = value


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _deep_copy_dict(d: dict) -> dict:
    """Deep copy a nested dict structure."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_dict(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result
