"""MongoDB identity store backend."""

from __future__ import annotations

import logging
import os
from typing import Any

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from botguard.errors import StoreError
from botguard.scoring.models import ReputationState
from botguard.storage.base import IdentityStore

logger = logging.getLogger("botguard.storage")


class MongoStore(IdentityStore):
    """Persistent identity store using one MongoDB document per identity.

    Documents look like ``{"_id": identity, "last_updated": ..., "state":
    {...}}``. When ``idle_ttl_seconds`` is configured, a TTL index on
    ``last_updated`` lets MongoDB evict identities that have gone quiet.

    Exclusivity is enforced with in-process locks, so a deployment must
    route every identity to a single process.
    """

    def __init__(self, config: dict[str, Any] | None = None, client: Any = None):
        super().__init__()
        config = config or {}
        self._uri = config.get("uri") or os.environ.get(
            "BG_MONGO_URI", "mongodb://localhost:27017"
        )
        self._db_name = config.get("database") or os.environ.get("BG_MONGO_DB", "botguard")
        self._collection_name = config.get("collection", "reputation")
        self._idle_ttl = config.get("idle_ttl_seconds")
        self._client: Any = client
        self._collection: Any = None

    def _connect(self) -> Any:
        """Establish the MongoDB connection and create indexes once."""
        if self._collection is not None:
            return self._collection

        try:
            if self._client is None:
                self._client = MongoClient(
                    self._uri, serverSelectionTimeoutMS=5000, tz_aware=True,
                )
            collection = self._client[self._db_name][self._collection_name]
            if self._idle_ttl:
                collection.create_index(
                    "last_updated", expireAfterSeconds=int(self._idle_ttl),
                )
        except PyMongoError as e:
            raise StoreError(f"MongoDB connection failed: {e}") from e

        self._collection = collection
        return collection

    def load(self, identity: str) -> ReputationState:
        collection = self._connect()
        try:
            doc = collection.find_one({"_id": identity})
        except PyMongoError as e:
            raise StoreError(f"Failed to load state for {identity}: {e}") from e

        if not doc:
            return ReputationState()
        return ReputationState.model_validate(doc["state"])

    def save(self, identity: str, state: ReputationState) -> None:
        collection = self._connect()
        doc = {
            "_id": identity,
            "last_updated": state.last_updated,
            "state": state.model_dump(),
        }
        try:
            collection.replace_one({"_id": identity}, doc, upsert=True)
        except PyMongoError as e:
            raise StoreError(f"Failed to save state for {identity}: {e}") from e
        logger.debug("State saved to MongoDB (identity: %s)", identity)

    def delete(self, identity: str) -> bool:
        collection = self._connect()
        try:
            result = collection.delete_one({"_id": identity})
        except PyMongoError as e:
            raise StoreError(f"Failed to delete state for {identity}: {e}") from e
        return result.deleted_count > 0
