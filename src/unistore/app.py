"""Counter demo — a toggle panel and a counter wired to a store.

The store is built by main() and injected; widgets only read state through
the bound render callback and change it through dispatch.
"""

from __future__ import annotations

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Static

from unistore import textual as stx
from unistore.counter import CounterState, counter_reducer, decrease, increase, toggle_switch
from unistore.store import Store, create_store


class TogglePanel(Static):
    """Clickable indicator; gets the `active` class while the toggle is on."""

    def __init__(self, store: Store, **kwargs) -> None:
        super().__init__("toggle", **kwargs)
        self.store = store

    def on_click(self, event: events.Click) -> None:
        self.store.dispatch(toggle_switch())


class CounterApp(App):
    CSS = """
    #toggle {
        width: 16;
        height: 3;
        content-align: center middle;
        background: $panel;
    }
    #toggle.active {
        background: $success;
    }
    #counter {
        height: 3;
        content-align: center middle;
        text-style: bold;
    }
    """

    def __init__(self, store: Store) -> None:
        super().__init__()
        self.store = store
        self._store_binding = None

    def compose(self) -> ComposeResult:
        yield TogglePanel(self.store, id="toggle")
        yield Static(id="counter")
        with Horizontal():
            yield Button("Increase", id="increase")
            yield Button("Decrease", id="decrease")

    def on_mount(self) -> None:
        self.render_state(self.store.get_state())
        self._store_binding = stx.bind(self, self.store, self.render_state, fire_immediately=False)

    def on_unmount(self) -> None:
        if self._store_binding is not None:
            self._store_binding.dispose()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "increase":
            self.store.dispatch(increase(1))
        elif event.button.id == "decrease":
            self.store.dispatch(decrease())

    def render_state(self, state: CounterState) -> None:
        self.query_one("#toggle", TogglePanel).set_class(state.toggle, "active")
        self.query_one("#counter", Static).update(str(state.counter))


def main() -> None:
    CounterApp(create_store(counter_reducer)).run()


if __name__ == "__main__":
    main()
