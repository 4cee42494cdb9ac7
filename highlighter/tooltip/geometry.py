"""Overlay placement relative to an anchor rectangle."""

from dataclasses import dataclass

ABOVE = "above"
BELOW = "below"
RIGHT = "right"
LEFT = "left"


@dataclass
class Rect:
    """A rectangle in viewport coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class Viewport:
    """Visible area size and its scroll offset within the document."""

    width: float
    height: float
    scroll_x: float = 0.0
    scroll_y: float = 0.0


@dataclass
class Placement:
    """Where the overlay ends up, in document coordinates."""

    left: float
    top: float
    side: str


def compute_position(
    anchor: Rect,
    overlay_width: float,
    overlay_height: float,
    viewport: Viewport,
    margin: float = 10.0,
    viewport_margin: float = 5.0,
) -> Placement:
    """
    Place an overlay next to an anchor.

    Tries centered above the anchor, then below, then to the right, then to
    the left. The result is shifted by the scroll offset and clamped so the
    overlay stays ``viewport_margin`` inside the visible area.

    Args:
        anchor: Anchor bounds in viewport coordinates.
        overlay_width: Overlay width.
        overlay_height: Overlay height.
        viewport: Visible area.
        margin: Gap between anchor and overlay.
        viewport_margin: Minimum gap between overlay and viewport edge.

    Returns:
        Placement in document coordinates.
    """
    x = anchor.left + anchor.width / 2 - overlay_width / 2
    y = anchor.top - overlay_height - margin
    side = ABOVE

    if y < 0:
        y = anchor.bottom + margin
        side = BELOW

        if y + overlay_height > viewport.height:
            # Neither above nor below fits
            y = anchor.top + anchor.height / 2 - overlay_height / 2
            x = anchor.right + margin
            side = RIGHT
            if x + overlay_width > viewport.width:
                x = anchor.left - overlay_width - margin
                side = LEFT

    x += viewport.scroll_x
    y += viewport.scroll_y

    low_x = viewport.scroll_x + viewport_margin
    high_x = viewport.scroll_x + viewport.width - overlay_width - viewport_margin
    if x < low_x:
        x = low_x
    elif x > high_x:
        x = high_x

    low_y = viewport.scroll_y + viewport_margin
    high_y = viewport.scroll_y + viewport.height - overlay_height - viewport_margin
    if y < low_y:
        y = low_y
    elif y > high_y:
        y = high_y

    return Placement(left=x, top=y, side=side)
