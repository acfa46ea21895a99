"""Shared "currently listening" state for the voice controls.

The main voice button and the navbar microphone both reflect whether speech
recognition is active. Instead of a page-global flag, one ListeningState is
created and handed to each control that needs it.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger("voicenav.listening")

__all__ = ["ListeningState"]

Listener = Callable[[bool], None]


class ListeningState:
    """Observable listening flag.

    Example:
        >>> state = ListeningState()
        >>> state.subscribe(lambda listening: print("listening:", listening))
        >>> state.toggle()
        listening: True
    """

    def __init__(self, is_listening: bool = False):
        self._is_listening = is_listening
        self._listeners: list[Listener] = []

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_listening(self, value: bool) -> None:
        """Update the flag and notify listeners if it changed."""
        value = bool(value)
        if value == self._is_listening:
            return
        self._is_listening = value
        self.notify()

    def toggle(self) -> bool:
        self.set_listening(not self._is_listening)
        return self._is_listening

    def notify(self) -> None:
        """Call every listener with the current flag.

        A failing listener is logged and does not stop the others.
        """
        for listener in list(self._listeners):
            try:
                listener(self._is_listening)
            except Exception as e:
                logger.error(
                    "listening_listener_failed",
                    extra={"error": str(e), "error_type": type(e).__name__},
                )
