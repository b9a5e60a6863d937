"""
Navigation Store

Holds the current ScreenState, applies events through navigate() and
notifies subscribers when the state actually changes.
"""

import logging
from typing import Callable, List, Optional

from .navigator import navigate, screen_title
from .state import ScreenState

logger = logging.getLogger(__name__)

Listener = Callable[[ScreenState, ScreenState], None]


class NavigationStore:
    """
    Reducer + subscriber list around navigate().

    Usage:
        nav = NavigationStore()
        nav.subscribe(lambda old, new: render(new))
        nav.dispatch(SelectCategory(category))
    """

    def __init__(self, initial: Optional[ScreenState] = None):
        self.state = initial or ScreenState()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(old_state, new_state); returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event) -> ScreenState:
        old = self.state
        new = navigate(event, old)
        if new == old:
            return old

        logger.debug("%s: %s -> %s", type(event).__name__, old.screen.value, new.screen.value)
        self.state = new
        for listener in list(self._listeners):
            listener(old, new)
        return new

    @property
    def title(self) -> str:
        return screen_title(self.state)
