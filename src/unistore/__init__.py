"""unistore: a minimal unidirectional state container for Python."""

from importlib.metadata import version as _version

__version__ = _version("unistore")

from unistore.errors import (
    StoreError,
    ConstructionError,
    TransitionError,
    ListenerError,
    DuplicateKindError,
)
from unistore.action import Action, action_creator, KindRegistry
from unistore._registry import Subscription
from unistore.store import Store, create_store, replay, INIT, REPLACE
from unistore.reaction import Reaction, reaction
# hot_reload, textual and app NOT auto-imported — opt-in only

__all__ = [
    "Action",
    "action_creator",
    "KindRegistry",
    "Store",
    "create_store",
    "replay",
    "INIT",
    "REPLACE",
    "Subscription",
    "Reaction",
    "reaction",
    "StoreError",
    "ConstructionError",
    "TransitionError",
    "ListenerError",
    "DuplicateKindError",
]
