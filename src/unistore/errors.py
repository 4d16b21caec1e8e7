"""Error taxonomy for unistore.

Nothing here is retried. Construction and transition errors reach the
caller directly; listener errors are collected per notification pass and
raised together once the pass is over.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by unistore."""


class ConstructionError(StoreError, TypeError):
    """The transition function (or a replacement for it) is not callable."""


class TransitionError(StoreError):
    """The transition function raised, or returned no state."""

    def __init__(self, message: str, action=None) -> None:
        super().__init__(message)
        self.action = action


class ListenerError(StoreError):
    """One or more listeners raised during notification.

    The state change that triggered the notification is already committed.
    """

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = list(errors)
        noun = "listener" if len(self.errors) == 1 else "listeners"
        super().__init__(f"{len(self.errors)} {noun} failed: {self.errors[0]!r}")


class DuplicateKindError(StoreError, ValueError):
    """An action kind was defined twice in the same registry."""
