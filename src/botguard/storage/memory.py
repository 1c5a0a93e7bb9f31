"""In-process identity store."""

from __future__ import annotations

from botguard.scoring.models import ReputationState
from botguard.storage.base import IdentityStore


class MemoryStore(IdentityStore):
    """Keeps states in a dict for the lifetime of the process.

    States are copied on the way in and out, so a working copy that is
    never saved leaves the stored state untouched.
    """

    def __init__(self) -> None:
        super().__init__()
        self._states: dict[str, ReputationState] = {}

    def load(self, identity: str) -> ReputationState:
        state = self._states.get(identity)
        if state is None:
            return ReputationState()
        return state.model_copy(deep=True)

    def save(self, identity: str, state: ReputationState) -> None:
        self._states[identity] = state.model_copy(deep=True)

    def delete(self, identity: str) -> bool:
        return self._states.pop(identity, None) is not None

    def identities(self) -> list[str]:
        return sorted(self._states)
