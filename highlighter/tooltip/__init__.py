"""Tooltip overlay: placement, content and state."""

from .content import render_tooltip_content
from .geometry import Placement, Rect, Viewport, compute_position
from .layout import LayoutProvider, StaticLayout
from .manager import HIDDEN, PENDING_HIDE, VISIBLE, TooltipManager
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "TooltipManager",
    "compute_position",
    "render_tooltip_content",
    "Placement",
    "Rect",
    "Viewport",
    "LayoutProvider",
    "StaticLayout",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "HIDDEN",
    "PENDING_HIDE",
    "VISIBLE",
]
