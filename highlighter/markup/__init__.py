"""Marker construction and tree surgery."""

from .events import CLICK, MOUSE_ENTER, MOUSE_LEAVE, EventBindings
from .materializer import RangeMaterializer

__all__ = [
    "EventBindings",
    "RangeMaterializer",
    "CLICK",
    "MOUSE_ENTER",
    "MOUSE_LEAVE",
]
