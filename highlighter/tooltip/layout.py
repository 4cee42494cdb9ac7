"""Geometry sources for the tooltip overlay."""

from typing import Optional, Protocol

from .geometry import Rect, Viewport


class LayoutProvider(Protocol):
    """Supplies rendered geometry for anchors, the overlay and the viewport."""

    def anchor_rect(self, anchor_id: str) -> Optional[Rect]: ...

    def overlay_size(self) -> tuple[float, float]: ...

    def viewport(self) -> Viewport: ...


class StaticLayout:
    """
    Layout provider backed by values the host sets explicitly.

    Anchors without a recorded rectangle have no geometry, so the overlay
    keeps its previous position.
    """

    def __init__(
        self,
        viewport_width: float = 1280.0,
        viewport_height: float = 800.0,
        overlay_width: float = 320.0,
        overlay_height: float = 200.0,
    ):
        self._viewport = Viewport(width=viewport_width, height=viewport_height)
        self._overlay_size = (overlay_width, overlay_height)
        self._rects: dict[str, Rect] = {}

    def set_anchor_rect(self, anchor_id: str, rect: Rect) -> None:
        self._rects[anchor_id] = rect

    def anchor_rect(self, anchor_id: str) -> Optional[Rect]:
        return self._rects.get(anchor_id)

    def set_overlay_size(self, width: float, height: float) -> None:
        self._overlay_size = (width, height)

    def overlay_size(self) -> tuple[float, float]:
        return self._overlay_size

    def scroll_to(self, scroll_x: float, scroll_y: float) -> None:
        self._viewport.scroll_x = scroll_x
        self._viewport.scroll_y = scroll_y

    def resize(self, width: float, height: float) -> None:
        self._viewport.width = width
        self._viewport.height = height

    def viewport(self) -> Viewport:
        return self._viewport
