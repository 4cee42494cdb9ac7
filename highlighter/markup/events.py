"""Pointer event bindings for marker elements.

The host that renders the document reports pointer events by marker id;
``EventBindings.dispatch`` routes them to the handlers bound when the marker
was created.
"""

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

MOUSE_ENTER = "mouseenter"
MOUSE_LEAVE = "mouseleave"
CLICK = "click"

Handler = Callable[[], None]


class MarkerHandlers(Protocol):
    """Tooltip operations triggered from marker events."""

    def show(self, anchor_id: str, span) -> None: ...

    def hide(self, delay: float | None = None) -> None: ...

    def toggle(self, anchor_id: str, span) -> None: ...


class EventBindings:
    """Maps marker id -> event type -> handler."""

    def __init__(self):
        self._handlers: dict[str, dict[str, Handler]] = {}

    def bind(self, element_id: str, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(element_id, {})[event_type] = handler

    def bind_marker(self, marker_id: str, span, handlers: MarkerHandlers) -> None:
        """Bind hover and click handlers for a newly created marker."""
        self.bind(marker_id, MOUSE_ENTER, lambda: handlers.show(marker_id, span))
        self.bind(marker_id, MOUSE_LEAVE, lambda: handlers.hide())
        self.bind(marker_id, CLICK, lambda: handlers.toggle(marker_id, span))

    def unbind(self, element_id: str) -> None:
        self._handlers.pop(element_id, None)

    def clear(self) -> None:
        self._handlers.clear()

    def is_bound(self, element_id: str, event_type: str | None = None) -> bool:
        handlers = self._handlers.get(element_id)
        if handlers is None:
            return False
        return event_type is None or event_type in handlers

    def dispatch(self, element_id: str, event_type: str) -> bool:
        """
        Run the handler bound for an event.

        Returns:
            True if a handler ran, False if none was bound.
        """
        handler = self._handlers.get(element_id, {}).get(event_type)
        if handler is None:
            logger.debug(f"No {event_type} handler bound for {element_id}")
            return False
        handler()
        return True

    def __len__(self) -> int:
        return len(self._handlers)
