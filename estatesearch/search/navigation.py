"""
Navigation port: the only way the search flow touches "the current URL".

``NavigationPort`` is what the synchronizer depends on. ``InMemoryHistory``
implements it as a browser-style session history (push, back, forward)
for the CLI and for tests.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

LocationListener = Callable[[str], None]


class NavigationPort(Protocol):
    def current_location(self) -> str:
        """Path plus query string of the current history entry."""
        ...

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        """Call listener with the new location on every change. Returns an unsubscribe function."""
        ...

    def push(self, location: str) -> None:
        """Add a new history entry and make it current."""
        ...


class InMemoryHistory:
    """Session history held in a list, with a pointer to the current entry."""

    def __init__(self, initial_location: str = "/") -> None:
        self._entries: list[str] = [initial_location]
        self._index = 0
        self._listeners: list[LocationListener] = []

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def current_location(self) -> str:
        return self._entries[self._index]

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def push(self, location: str) -> None:
        """Push a new entry. Entries ahead of the current one are discarded."""
        del self._entries[self._index + 1:]
        self._entries.append(location)
        self._index += 1
        logger.debug("Navigated to %s", location)
        self._notify()

    def go(self, delta: int) -> bool:
        """Move delta entries through history. Returns False (and does nothing) if out of range."""
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        logger.debug("History moved to %s", self.current_location())
        self._notify()
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)

    def _notify(self) -> None:
        location = self.current_location()
        for listener in list(self._listeners):
            listener(location)
