"""Textual integration for unistore. Opt-in — requires textual.

bind() subscribes a render callback to a store on behalf of an app. The
callback always receives the latest committed state and always runs on the
thread that created the binding (the UI thread).

Pause state is owned by this module and keyed by id(app); it is never
written onto the app object.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("unistore.textual")

# id(app) of every app currently inside pause().
_paused: set[int] = set()


@contextmanager
def pause(app):
    """Hold back bound renders while widgets are being replaced."""
    _paused.add(id(app))
    try:
        yield
    finally:
        _paused.discard(id(app))


def is_safe(app) -> bool:
    """Can the app's widget tree be queried right now?"""
    if id(app) in _paused:
        return False
    return bool(app.is_running)


class Binding:
    """A render callback subscribed to a store for one app.

    Call it (or .dispose()) to unsubscribe.
    """

    __slots__ = ("_app", "_store", "_render", "_ui_thread", "_subscription")

    def __init__(self, app, store, render) -> None:
        self._app = app
        self._store = store
        self._render = render
        self._ui_thread = threading.get_ident()
        self._subscription = store.subscribe(self._on_change)

    @property
    def active(self) -> bool:
        return self._subscription.active

    def dispose(self) -> None:
        self._subscription.dispose()

    __call__ = dispose

    def _on_change(self) -> None:
        if not is_safe(self._app):
            return
        if threading.get_ident() == self._ui_thread:
            self.render_now()
            return
        # The dispatching thread holds the store lock here, and
        # call_from_thread blocks until the UI thread has run the render.
        threading.Thread(target=self._hand_off, daemon=True).start()

    def _hand_off(self) -> None:
        try:
            self._app.call_from_thread(self.render_now)
        except Exception:
            logger.exception("Render handed off from a worker thread failed")

    def render_now(self) -> None:
        """Render the current state, unless the widget tree is not queryable."""
        if not is_safe(self._app):
            return
        try:
            self._render(self._store.get_state())
        except NoMatches:
            pass

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        return f"Binding({getattr(self._render, '__name__', 'render')}, {state})"


def bind(app, store, render, *, fire_immediately=True) -> Binding:
    """Subscribe render(state) to store, bridged safely to Textual widgets.

    Skips while the app is not running or paused and swallows NoMatches from
    widget queries. Notifications raised on other threads are marshalled to
    the UI thread through app.call_from_thread without blocking the
    dispatching thread. Other render errors reach the dispatch caller when
    the render runs inline, and are logged when it was handed off.
    """
    binding = Binding(app, store, render)
    if fire_immediately:
        binding.render_now()
    return binding
