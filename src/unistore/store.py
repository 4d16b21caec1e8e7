"""Store — one state value, a pure transition function, and its listeners.

dispatch(action) runs the reducer, commits the result, then calls every
subscribed listener in subscription order. Nothing else changes the state.

Re-entrancy: a dispatch issued while another is in progress (typically from
a listener) is queued. The outermost dispatch drains the queue after its own
notification pass, giving each queued action its own transition and pass.

A failed transition leaves the state untouched and notifies nobody. A failing
listener does not stop the others: its error is logged, collected, and raised
as a ListenerError once all passes are done.

Thread safety: dispatch, subscribe and unsubscribe share one RLock per store.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Generic, Iterable, TypeVar

from unistore._registry import Listener, ListenerRegistry, Subscription
from unistore.action import Action
from unistore.errors import ConstructionError, ListenerError, TransitionError

logger = logging.getLogger("unistore.store")

S = TypeVar("S")

Reducer = Callable[[S | None, Action], S]

# Sent once at construction so the reducer can supply its default state.
INIT = Action("@@unistore/INIT")
# Applied with the new reducer by replace_reducer so it can settle the state.
REPLACE = Action("@@unistore/REPLACE")


def _transition(reducer: Reducer[S], state: S | None, action: Action) -> S:
    """Apply reducer once. Raises TransitionError; never returns None."""
    try:
        next_state = reducer(state, action)
    except Exception as exc:
        raise TransitionError(f"Reducer failed on {action!r}: {exc!r}", action) from exc
    if next_state is None:
        raise TransitionError(f"Reducer returned no state for {action!r}", action)
    return next_state


def _name(fn) -> str:
    return getattr(fn, "__name__", repr(fn))


class Store(Generic[S]):
    """Holds exactly one state value and fans out change notifications."""

    def __init__(self, reducer: Reducer[S], initial_state: S | None = None) -> None:
        if not callable(reducer):
            raise ConstructionError(f"reducer must be callable, got {type(reducer).__name__}")
        self._reducer = reducer
        self._lock = threading.RLock()
        self._listeners = ListenerRegistry(self._lock)
        self._queue: deque[tuple[Action, Reducer[S] | None]] = deque()
        self._dispatching = False
        if initial_state is None:
            initial_state = _transition(reducer, None, INIT)
        self._state: S = initial_state

    def get_state(self) -> S:
        """Current committed state. Never a partially applied one."""
        return self._state

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        """Register listener. Returns a handle; call it to unsubscribe.

        Registering the same callable twice gives two independent
        registrations.
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        return self._listeners.add(listener)

    def dispatch(self, action: Action) -> None:
        """Apply action, commit, and notify listeners.

        Raises TransitionError if the reducer fails (state unchanged), and
        ListenerError after notification if any listener raised (state
        committed).
        """
        if not isinstance(action, Action):
            raise TypeError(f"dispatch() expects an Action, got {type(action).__name__}")
        self._submit(action, None)

    def replace_reducer(self, reducer: Reducer[S]) -> None:
        """Swap the transition function by applying REPLACE with it.

        The swap is a transition like any other: it is queued behind a
        dispatch in progress, and if the new reducer fails on REPLACE
        neither the reducer nor the state changes.
        """
        if not callable(reducer):
            raise ConstructionError(f"reducer must be callable, got {type(reducer).__name__}")
        self._submit(REPLACE, reducer)

    def dispose(self) -> None:
        """Drop every listener registration. The store stays usable."""
        self._listeners.clear()

    def _submit(self, action: Action, replacement: Reducer[S] | None) -> None:
        with self._lock:
            if self._dispatching:
                self._queue.append((action, replacement))
                logger.debug("Queued %r behind the dispatch in progress", action)
                return
            self._dispatching = True
            try:
                errors = self._drain(action, replacement)
            finally:
                self._dispatching = False
                if self._queue:
                    logger.warning(
                        "Discarding %d queued action(s) after a failed dispatch",
                        len(self._queue),
                    )
                    self._queue.clear()

        if errors:
            raise ListenerError(errors)

    def _drain(self, action: Action, replacement: Reducer[S] | None) -> list[Exception]:
        errors: list[Exception] = []
        while True:
            self._commit(action, replacement)
            errors.extend(self._notify())
            if not self._queue:
                return errors
            action, replacement = self._queue.popleft()

    def _commit(self, action: Action, replacement: Reducer[S] | None) -> None:
        """Apply one transition; a replacement reducer is installed only if it succeeds."""
        reducer = replacement if replacement is not None else self._reducer
        self._state = _transition(reducer, self._state, action)
        if replacement is not None:
            logger.debug("Reducer replaced: %s -> %s", _name(self._reducer), _name(replacement))
            self._reducer = replacement
        else:
            logger.debug("Dispatched %r", action)

    def _notify(self) -> list[Exception]:
        errors: list[Exception] = []
        for listener in self._listeners.snapshot():
            try:
                listener()
            except Exception as exc:
                logger.exception("Listener %s failed", _name(listener))
                errors.append(exc)
        return errors

    def __repr__(self) -> str:
        return f"Store({_name(self._reducer)}, {self._state!r})"


def create_store(reducer: Reducer[S], initial_state: S | None = None) -> Store[S]:
    """Create a Store.

    Usage:
        store = create_store(counter_reducer)
        unsubscribe = store.subscribe(lambda: print(store.get_state()))
        store.dispatch(increase(3))
        unsubscribe()
    """
    return Store(reducer, initial_state)


def replay(
    reducer: Reducer[S],
    actions: Iterable[Action],
    initial_state: S | None = None,
) -> S:
    """Fold reducer over actions, starting from its initial state.

    A store that has dispatched `actions` in order holds exactly this value.
    """
    state = initial_state if initial_state is not None else _transition(reducer, None, INIT)
    for action in actions:
        state = _transition(reducer, state, action)
    return state
