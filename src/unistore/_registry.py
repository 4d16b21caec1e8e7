"""Listener registry — ordered, identifiable subscriptions.

Each subscribe() creates a new registration with its own id, so the same
callable can be registered twice and removed once. Notification iterates a
snapshot taken at pass start; a registration removed mid-pass is skipped if
it has not been reached yet.
"""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Iterator

Listener = Callable[[], None]


class Subscription:
    """Handle for one registration. Call it (or .dispose()) to unsubscribe."""

    __slots__ = ("_id", "_registry")

    def __init__(self, registry: ListenerRegistry, sub_id: int) -> None:
        self._id = sub_id
        self._registry = registry

    @property
    def active(self) -> bool:
        return self._registry is not None and self._id in self._registry

    def dispose(self) -> None:
        """Remove this registration. Safe to call more than once."""
        registry, self._registry = self._registry, None
        if registry is not None:
            registry.remove(self._id)

    __call__ = dispose

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        return f"Subscription({self._id}, {state})"


class ListenerRegistry:
    """Insertion-ordered listeners keyed by registration id.

    Mutations go through `lock`, which the owning store shares with
    dispatch so that every registry change is serialized with it.
    """

    def __init__(self, lock=None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._listeners: dict[int, Listener] = {}
        self._ids = itertools.count(1)

    def add(self, listener: Listener) -> Subscription:
        with self._lock:
            sub_id = next(self._ids)
            self._listeners[sub_id] = listener
        return Subscription(self, sub_id)

    def remove(self, sub_id: int) -> None:
        with self._lock:
            self._listeners.pop(sub_id, None)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def snapshot(self) -> Iterator[Listener]:
        """Yield listeners registered at call time, skipping any removed since."""
        for sub_id, listener in list(self._listeners.items()):
            if sub_id in self._listeners:
                yield listener

    def __contains__(self, sub_id: object) -> bool:
        return sub_id in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)
