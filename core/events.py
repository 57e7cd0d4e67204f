"""
Core Module - Event Source.

A minimal observer list. subscribe() hands back a disposer so the
subscriber owns its own unsubscription; there is no global listener list.
"""

import logging
from typing import Callable, Generic, List, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]
Disposer = Callable[[], None]


class EventSource(Generic[T]):
    """Delivers events of type T to subscribed listeners, in subscription order."""

    def __init__(self, name: str = "events") -> None:
        self._name = name
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Disposer:
        """
        Register a listener.

        Returns:
            A zero-argument callable that removes this listener. Calling it
            more than once is harmless.
        """
        self._listeners.append(listener)

        def dispose() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return dispose

    def emit(self, event: T) -> None:
        """Deliver an event; a failing listener does not stop the others."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"[{self._name}] Listener {listener!r} failed: {e}", exc_info=True)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
