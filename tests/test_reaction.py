"""Tests for selector reactions."""

from unistore import create_store, reaction
from unistore.counter import counter_reducer, decrease, increase, toggle_switch


class TestReaction:
    def test_no_initial_effect(self):
        """Without fire_immediately, effect doesn't run on setup."""
        s = create_store(counter_reducer)
        effects = []
        reaction(s, lambda state: state.counter, lambda v: effects.append(v))
        assert effects == []

    def test_fires_on_change(self):
        s = create_store(counter_reducer)
        effects = []
        reaction(s, lambda state: state.counter, lambda v: effects.append(v))
        s.dispatch(increase(2))
        assert effects == [2]

    def test_fire_immediately(self):
        s = create_store(counter_reducer)
        effects = []
        reaction(s, lambda state: state.counter, lambda v: effects.append(v), fire_immediately=True)
        assert effects == [0]

    def test_unrelated_change_ignored(self):
        s = create_store(counter_reducer)
        effects = []
        reaction(s, lambda state: state.counter, lambda v: effects.append(v))
        s.dispatch(toggle_switch())
        assert effects == []

    def test_dedup_effect(self):
        """Effect only fires when the selected value actually changes."""
        s = create_store(counter_reducer)
        effects = []
        reaction(
            s,
            lambda state: "even" if state.counter % 2 == 0 else "odd",
            lambda v: effects.append(v),
        )
        s.dispatch(increase(2))  # still even
        assert effects == []
        s.dispatch(decrease())  # now odd
        assert effects == ["odd"]

    def test_dispose(self):
        s = create_store(counter_reducer)
        effects = []
        r = reaction(s, lambda state: state.counter, lambda v: effects.append(v))
        s.dispatch(increase(1))
        assert effects == [1]
        r.dispose()
        r.dispose()  # idempotent
        s.dispatch(increase(1))
        assert effects == [1]  # no more effects
        assert r.disposed
        assert s.listener_count == 0
