"""Exception types raised by botguard components."""

from __future__ import annotations


class BotguardError(Exception):
    """Base class for all botguard errors."""


class StoreError(BotguardError):
    """The identity store failed to load, persist, or delete state.

    A decision computed before the failure is not authoritative and must
    not be acted on by the caller.
    """


class TrackerUnavailable(BotguardError):
    """The tracker service could not be reached or returned a server error."""
