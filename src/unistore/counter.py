"""Counter domain — a toggle flag and an integer counter.

State is a frozen dataclass; every transition builds a new value with
dataclasses.replace, so unchanged fields are shared with the previous state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from unistore.action import Action, KindRegistry, action_creator
from unistore.store import INIT

kinds = KindRegistry()

TOGGLE_SWITCH, INCREASE, DECREASE = kinds.define("TOGGLE_SWITCH", "INCREASE", "DECREASE")


@dataclass(frozen=True)
class CounterState:
    toggle: bool = False
    counter: int = 0


INITIAL_STATE = CounterState()


@action_creator(TOGGLE_SWITCH)
def toggle_switch():
    return None


@action_creator(INCREASE)
def increase(difference: int):
    return {"difference": difference}


@action_creator(DECREASE)
def decrease(difference: int = 1):
    # Symmetric with increase(); decrease() alone still subtracts one.
    return {"difference": difference}


def counter_reducer(state: CounterState | None = None, action: Action = INIT) -> CounterState:
    """Pure transition for CounterState. Unknown kinds return state as is."""
    if state is None:
        state = INITIAL_STATE
    if action.kind == TOGGLE_SWITCH:
        return replace(state, toggle=not state.toggle)
    if action.kind == INCREASE:
        return replace(state, counter=state.counter + action["difference"])
    if action.kind == DECREASE:
        return replace(state, counter=state.counter - action.get("difference", 1))
    return state
