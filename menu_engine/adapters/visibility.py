"""
In-process visibility sources.

Hosts that render the feed push viewport and page visibility changes in
here; the engagement buffer and flush scheduler subscribe to them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from menu_engine.domain.entities import MenuItem

logger = logging.getLogger(__name__)

VisibleCallback = Callable[[MenuItem, float], None]
HiddenCallback = Callable[[str], None]
StateCallback = Callable[[str], None]


class InMemoryViewportReporter:
    """Fan-out of per-item viewport events to subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[tuple[VisibleCallback, HiddenCallback]] = []

    def subscribe(
        self,
        on_became_visible: VisibleCallback,
        on_became_hidden: HiddenCallback,
    ) -> Callable[[], None]:
        entry = (on_became_visible, on_became_hidden)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def report_visible(self, item: MenuItem, visible_ratio: float = 1.0) -> None:
        for on_visible, _ in list(self._subscribers):
            on_visible(item, visible_ratio)

    def report_hidden(self, food_name: str) -> None:
        for _, on_hidden in list(self._subscribers):
            on_hidden(food_name)


class InMemoryPageVisibility:
    """Page visibility state (``visible`` / ``hidden``) with change callbacks."""

    def __init__(self, state: str = "visible") -> None:
        self._state = state
        self._subscribers: list[StateCallback] = []

    @property
    def state(self) -> str:
        return self._state

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_state(self, state: str) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug("Page visibility changed to %s", state)
        for callback in list(self._subscribers):
            callback(state)
