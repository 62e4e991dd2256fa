"""Change notifications for collections.

Each collection owns its own subscriber table; there is no shared bus.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Callable

Callback = Callable[..., Any]


class CollectionEvent(StrEnum):
    SORT = "sort"
    REMOVE = "remove"
    RESET = "reset"


class Events:
    """Observer registration mixin.

    Callbacks run synchronously, in registration order, inside the call that
    triggered them.
    """

    _handlers: dict[str, list[Callback]]

    def _ensure_handlers(self) -> dict[str, list[Callback]]:
        handlers = self.__dict__.get("_handlers")
        if handlers is None:
            handlers = {}
            self._handlers = handlers
        return handlers

    def on(self, event: CollectionEvent | str, callback: Callback) -> Events:
        """Subscribe ``callback`` to ``event``."""
        self._ensure_handlers().setdefault(str(event), []).append(callback)
        return self

    def off(
        self,
        event: CollectionEvent | str | None = None,
        callback: Callback | None = None,
    ) -> Events:
        """Unsubscribe.

        With no arguments every handler is dropped; with only ``event`` every
        handler of that event; otherwise just ``callback``.
        """
        handlers = self._ensure_handlers()
        if event is None:
            if callback is None:
                handlers.clear()
                return self
            names = list(handlers)
        else:
            names = [str(event)]
        for name in names:
            if callback is None:
                handlers.pop(name, None)
                continue
            remaining = [h for h in handlers.get(name, []) if h is not callback]
            if remaining:
                handlers[name] = remaining
            else:
                handlers.pop(name, None)
        return self

    def trigger(self, event: CollectionEvent | str, *args: Any) -> Events:
        """Call every handler of ``event`` with ``args``."""
        # Copy so handlers may unsubscribe while being called.
        for callback in list(self._ensure_handlers().get(str(event), [])):
            callback(*args)
        return self

    def has_listeners(self, event: CollectionEvent | str) -> bool:
        return bool(self._ensure_handlers().get(str(event)))
