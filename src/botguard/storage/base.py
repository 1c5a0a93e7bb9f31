"""Identity store contract with per-identity exclusive execution."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from botguard.scoring.models import ReputationState


class LockTable:
    """One lock per identity, created on first use and never evicted.

    The table lock is held only long enough to find or create the
    identity's lock; callers then serialize on the per-identity lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, identity: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(identity)
            if lock is None:
                lock = self._locks[identity] = threading.Lock()
            return lock

    def __len__(self) -> int:
        return len(self._locks)


class IdentityStore(ABC):
    """Keyed persistent store for ReputationState.

    ``load``/``save`` sequences issued inside ``exclusive(identity)`` never
    interleave with another caller's sequence for the same identity.
    Backends raise StoreError on any failure.
    """

    def __init__(self) -> None:
        self._locks = LockTable()

    @contextmanager
    def exclusive(self, identity: str) -> Iterator[None]:
        """Hold the identity's lock for the duration of the block."""
        with self._locks.get(identity):
            yield

    @abstractmethod
    def load(self, identity: str) -> ReputationState:
        """Return the stored state, or a fresh default state if absent."""
        ...

    @abstractmethod
    def save(self, identity: str, state: ReputationState) -> None:
        """Persist the state. Raises StoreError on failure."""
        ...

    @abstractmethod
    def delete(self, identity: str) -> bool:
        """Remove the identity's state. Returns True if something was removed."""
        ...
