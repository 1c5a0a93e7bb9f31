"""Identity store backends."""

from __future__ import annotations

from typing import Any

from botguard.storage.base import IdentityStore, LockTable
from botguard.storage.memory import MemoryStore


def create_store(config: dict[str, Any]) -> IdentityStore:
    """Build the store named by ``storage.backend`` (memory or mongo)."""
    backend = config.get("storage", {}).get("backend", "memory")
    if backend == "memory":
        return MemoryStore()
    elif backend == "mongo":
        from botguard.storage.mongo import MongoStore

        return MongoStore(config.get("mongodb", {}))
    raise ValueError(f"Unknown storage backend: {backend}. Use memory or mongo.")


__all__ = ["IdentityStore", "LockTable", "MemoryStore", "create_store"]
