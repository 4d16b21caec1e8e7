"""Reactions — side effects on a selected slice of store state.

A plain listener runs after every dispatch. A reaction runs its selector on
each notification and calls the effect only when the selected value differs
from the last one, so an unrelated change (or an unknown action) does not
re-trigger it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from unistore.store import Store

T = TypeVar("T")


class Reaction(Generic[T]):
    """Tracks selector(state); calls effect(value) when the value changes."""

    __slots__ = ("_store", "_selector", "_effect", "_last_value", "_subscription")

    def __init__(
        self,
        store: Store,
        selector: Callable[[object], T],
        effect: Callable[[T], None],
    ) -> None:
        self._store = store
        self._selector = selector
        self._effect = effect
        self._last_value: T = selector(store.get_state())
        self._subscription = store.subscribe(self._run)

    @property
    def disposed(self) -> bool:
        return not self._subscription.active

    def _run(self) -> None:
        new_value = self._selector(self._store.get_state())
        if new_value != self._last_value:
            self._last_value = new_value
            self._effect(new_value)

    def dispose(self) -> None:
        """Stop this reaction. Safe to call more than once."""
        self._subscription.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"Reaction({getattr(self._selector, '__name__', 'selector')}, {state})"


def reaction(
    store: Store,
    selector: Callable[[object], T],
    effect: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> Reaction[T]:
    """Call effect(value) whenever selector(store.get_state()) changes.

    Returns the Reaction (call .dispose() to stop).

    Usage:
        store = create_store(counter_reducer)
        seen = []
        r = reaction(store, lambda s: s.counter, seen.append)

        store.dispatch(toggle_switch())
        # seen == [] — counter unchanged

        store.dispatch(increase(2))
        # seen == [2]

        r.dispose()
    """
    r = Reaction(store, selector, effect)
    if fire_immediately:
        effect(r._last_value)
    return r
