"""
Minimal event subscriptions used by watch sessions and record channels.
"""

import logging
from typing import Any, Callable, List


logger = logging.getLogger(__name__)


class EventHook:
    """A named list of handlers fired in subscription order.

    Example:
        >>> hook = EventHook("update")
        >>> unsubscribe = hook.subscribe(lambda paths: print(paths))
        >>> hook.emit(["a.js"])
        ['a.js']
        >>> unsubscribe()
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[..., Any]] = []

    def subscribe(self, handler: Callable[..., Any]) -> Callable[[], None]:
        """Register a handler and return a function that removes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, *args: Any) -> int:
        """Call every handler with the given arguments.

        Returns:
            Number of handlers called
        """
        handlers = list(self._handlers)
        for handler in handlers:
            handler(*args)
        return len(handlers)

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"<EventHook {self.name!r} handlers={len(self._handlers)}>"
