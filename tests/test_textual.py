"""Tests for unistore.textual — Textual integration layer."""

import logging
import threading
import time

import pytest
from textual.css.query import NoMatches

from unistore import ListenerError, create_store
from unistore import textual as stx
from unistore.counter import counter_reducer, increase


class _MockApp:
    """Minimal mock matching the Textual App interface stx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


class _UIThreadApp(_MockApp):
    """call_from_thread blocks on a UI thread that dispatches first, once."""

    def __init__(self, store):
        super().__init__()
        self.store = store
        self.timeouts = []
        self._ui_dispatched = False

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        finished = threading.Event()

        def _ui():
            if not self._ui_dispatched:
                self._ui_dispatched = True
                self.store.dispatch(increase(10))
            fn(*args)
            finished.set()

        threading.Thread(target=_ui, daemon=True).start()
        if not finished.wait(timeout=2):
            self.timeouts.append(fn)


class TestBind:
    def test_renders_immediately(self):
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        stx.bind(app, s, lambda state: rendered.append(state.counter))
        assert rendered == [0]

    def test_without_fire_immediately(self):
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        stx.bind(app, s, lambda state: rendered.append(state.counter), fire_immediately=False)
        assert rendered == []
        s.dispatch(increase(1))
        assert rendered == [1]

    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        s = create_store(counter_reducer)
        rendered = []
        stx.bind(app, s, lambda state: rendered.append(state.counter))
        s.dispatch(increase(1))
        assert rendered == []

    def test_skips_during_pause(self):
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        stx.bind(app, s, lambda state: rendered.append(state.counter), fire_immediately=False)
        with stx.pause(app):
            s.dispatch(increase(1))
        assert rendered == []
        s.dispatch(increase(1))
        assert rendered == [2]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        s = create_store(counter_reducer)

        def _raise_nomatch(state):
            raise NoMatches("#counter")

        # Should not raise
        sub = stx.bind(app, s, _raise_nomatch)
        s.dispatch(increase(1))
        sub.dispose()

    def test_propagates_real_errors(self):
        """Non-NoMatches exceptions reach the dispatch caller."""
        app = _MockApp()
        s = create_store(counter_reducer)

        def _raise_value_error(state):
            raise ValueError("boom")

        stx.bind(app, s, _raise_value_error, fire_immediately=False)
        with pytest.raises(ListenerError) as info:
            s.dispatch(increase(1))
        assert isinstance(info.value.errors[0], ValueError)

    def test_dispose_stops_rendering(self):
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        sub = stx.bind(app, s, lambda state: rendered.append(state.counter))
        s.dispatch(increase(1))
        assert rendered == [0, 1]
        sub.dispose()
        s.dispatch(increase(1))
        assert rendered == [0, 1]

    def test_thread_marshal(self):
        """Dispatches from a background thread render via call_from_thread."""
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        done = threading.Event()

        def render(state):
            rendered.append(state.counter)
            done.set()

        stx.bind(app, s, render, fire_immediately=False)

        t = threading.Thread(target=lambda: s.dispatch(increase(2)))
        t.start()
        t.join()

        assert done.wait(timeout=2)
        assert rendered == [2]
        assert len(app._call_from_thread_log) == 1

    def test_worker_does_not_block_ui_dispatch(self):
        """The UI thread can dispatch while a worker's render is pending."""
        s = create_store(counter_reducer)
        app = _UIThreadApp(s)
        rendered = []
        done = threading.Event()

        def render(state):
            rendered.append(state.counter)
            if state.counter == 11:
                done.set()

        stx.bind(app, s, render, fire_immediately=False)

        worker = threading.Thread(target=lambda: s.dispatch(increase(1)))
        worker.start()
        worker.join(timeout=2)

        assert not worker.is_alive()
        assert done.wait(timeout=2)
        assert app.timeouts == []
        assert s.get_state().counter == 11
        assert rendered[-1] == 11

    def test_handed_off_render_errors_are_logged(self, caplog):
        app = _MockApp()
        s = create_store(counter_reducer)
        failed = threading.Event()

        def render(state):
            failed.set()
            raise ValueError("boom")

        stx.bind(app, s, render, fire_immediately=False)
        with caplog.at_level(logging.ERROR, logger="unistore.textual"):
            t = threading.Thread(target=lambda: s.dispatch(increase(1)))
            t.start()
            t.join()
            assert failed.wait(timeout=2)
            for _ in range(100):
                if "worker thread failed" in caplog.text:
                    break
                time.sleep(0.01)

        assert "worker thread failed" in caplog.text

    def test_render_now_respects_pause(self):
        app = _MockApp()
        s = create_store(counter_reducer)
        rendered = []
        binding = stx.bind(app, s, lambda state: rendered.append(state.counter), fire_immediately=False)
        with stx.pause(app):
            binding.render_now()
        assert rendered == []
        binding.render_now()
        assert rendered == [0]


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert stx.is_safe(app)

        with pytest.raises(RuntimeError):
            with stx.pause(app):
                assert not stx.is_safe(app)
                raise RuntimeError("oops")

        # Restored despite exception
        assert stx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        """Pause state lives in the module, not on the app."""
        app = _MockApp()
        attrs_before = set(vars(app))
        with stx.pause(app):
            attrs_during = set(vars(app))
        attrs_after = set(vars(app))
        assert attrs_before == attrs_during, (
            f"pause() added attributes to app: {attrs_during - attrs_before}"
        )
        assert attrs_before == attrs_after

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with stx.pause(app_a):
            assert not stx.is_safe(app_a)
            assert stx.is_safe(app_b)
