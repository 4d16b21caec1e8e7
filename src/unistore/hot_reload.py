"""Hot-reload-aware store. Opt-in — import only if you need hot-reload support."""

import logging

from unistore.errors import TransitionError
from unistore.store import Store, _name

logger = logging.getLogger("unistore.hot_reload")


class HotReloadStore(Store):
    """Store whose reducer can be swapped after a module reload.

    Same API as Store. Adds:
    - Exception safety: a replacement reducer that fails on the current
      state is rejected and logged instead of raising
    - Logging: replacements are logged
    - Degraded operation: on failure the store keeps its state and reducer
    """

    def replace_reducer(self, reducer) -> bool:
        """Safe replacement. Returns False if the new reducer was rejected.

        Called during a dispatch (e.g. from a listener), the swap is queued
        behind it; a rejection then surfaces from that dispatch instead.
        """
        with self._lock:
            previous = _name(self._reducer)
            queued = self._dispatching
            try:
                super().replace_reducer(reducer)
            except TransitionError:
                logger.exception("Rejected reducer %s; keeping %s", _name(reducer), previous)
                return False
        if queued:
            logger.info("Queued reducer replacement: %s -> %s", previous, _name(reducer))
        else:
            logger.info("Replaced reducer: %s -> %s", previous, _name(reducer))
        return True
