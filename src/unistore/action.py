"""Actions — tagged values describing an intended state change.

An Action carries a `kind` discriminator and an optional read-only payload.
Action creators are plain factories; the @action_creator decorator turns a
function that returns a payload into one that returns a full Action.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, ParamSpec

from unistore.errors import DuplicateKindError

P = ParamSpec("P")


@dataclass(frozen=True)
class Action:
    """A discriminated action value. Immutable, compared by value."""

    kind: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or not self.kind:
            raise TypeError(f"Action kind must be a non-empty string, got {self.kind!r}")
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def __repr__(self) -> str:
        if not self.payload:
            return f"Action({self.kind!r})"
        return f"Action({self.kind!r}, {dict(self.payload)!r})"


def action_creator(kind: str) -> Callable[[Callable[P, Mapping | None]], Callable[P, Action]]:
    """Decorator: build an Action of `kind` from the payload fn returns.

    Usage:
        @action_creator("INCREASE")
        def increase(difference):
            return {"difference": difference}

        increase(3)  # Action('INCREASE', {'difference': 3})
        increase.kind  # 'INCREASE'
    """

    def decorate(fn: Callable[P, Mapping | None]) -> Callable[P, Action]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Action:
            payload = fn(*args, **kwargs)
            return Action(kind, payload or {})

        wrapper.kind = kind
        return wrapper

    return decorate


class KindRegistry:
    """Set of action kinds for one application.

    Kinds must be unique: two actions sharing a discriminator make the
    reducer's behavior ambiguous, so a collision raises instead of being
    resolved quietly.
    """

    def __init__(self, namespace: str = "") -> None:
        self._namespace = namespace
        self._kinds: list[str] = []

    def define(self, *names: str) -> tuple[str, ...]:
        """Register names and return the full kind strings, in order."""
        kinds = tuple(self._qualify(name) for name in names)
        seen = set(self._kinds)
        for kind in kinds:
            if kind in seen:
                raise DuplicateKindError(f"Action kind {kind!r} is already defined")
            seen.add(kind)
        self._kinds.extend(kinds)
        return kinds

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(self._kinds)

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds

    def _qualify(self, name: str) -> str:
        return f"{self._namespace}/{name}" if self._namespace else name
