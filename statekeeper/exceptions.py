"""Exception hierarchy for statekeeper."""

from __future__ import annotations


class StatekeeperError(Exception):
    """Base class for all statekeeper errors."""


class DefinitionError(StatekeeperError):
    """A machine definition or its action registry is inconsistent."""


class ActionError(StatekeeperError):
    """An action returned something other than a context update."""


class StoreUnavailable(StatekeeperError):
    """The snapshot store could not be reached or timed out."""


class CorruptSnapshot(StatekeeperError):
    """Stored bytes could not be decoded into a snapshot."""


class CallbackFailure(StatekeeperError):
    """An ``on_change`` or ``on_done`` hook raised after the state was saved.

    Never raised by the instance manager; instances are collected on the
    returned ``RunResult`` instead.
    """

    def __init__(self, hook: str, key: str, error: BaseException) -> None:
        super().__init__(f"{hook} hook failed for {key}: {error!r}")
        self.hook = hook
        self.key = key
        self.error = error


__all__ = [
    "StatekeeperError",
    "DefinitionError",
    "ActionError",
    "StoreUnavailable",
    "CorruptSnapshot",
    "CallbackFailure",
]
