"""Hover overlay showing the details of the marker under the pointer."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..config import TooltipConfig
from ..constants import IGNORE_ATTR, TOOLTIP_CLASS, TOOLTIP_ID, TOOLTIP_STYLES_ID
from ..models import AnnotationSpan
from ..styles import inject_tooltip_styles, remove_stylesheet
from .content import render_tooltip_content
from .geometry import Placement, compute_position
from .layout import LayoutProvider, StaticLayout
from .scheduler import ManualScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

HIDDEN = "hidden"
PENDING_HIDE = "pending-hide"
VISIBLE = "visible"


class TooltipManager:
    """
    Owns the single tooltip overlay of a document.

    States are ``hidden``, ``visible`` and ``pending-hide``. A pending hide
    is a scheduler timer; showing again or entering the overlay cancels it.
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        config: Optional[TooltipConfig] = None,
        layout: Optional[LayoutProvider] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Initialize the manager and inject the tooltip stylesheet.

        Args:
            soup: Document the overlay lives in.
            config: Tooltip configuration. Defaults to TooltipConfig().
            layout: Geometry source. Defaults to a StaticLayout sized from
                the configuration.
            scheduler: Timer source for delayed hides. Defaults to a
                ManualScheduler.
        """
        self.soup = soup
        self.config = config or TooltipConfig()
        self.layout = layout or StaticLayout(
            viewport_width=self.config.viewport_width,
            viewport_height=self.config.viewport_height,
            overlay_width=self.config.overlay_width,
            overlay_height=self.config.overlay_height,
        )
        self.scheduler = scheduler or ManualScheduler()

        self.state = HIDDEN
        self.overlay: Optional[Tag] = None
        self.current_anchor: Optional[str] = None
        self.current_span: Optional[AnnotationSpan] = None
        self.placement: Optional[Placement] = None
        self._hide_timer: Optional[TimerHandle] = None

        inject_tooltip_styles(soup)

    @property
    def is_visible(self) -> bool:
        return self.state != HIDDEN

    def show(self, anchor_id: str, span: AnnotationSpan) -> None:
        """Show the overlay for a marker, cancelling any pending hide."""
        self._cancel_hide()
        self.current_anchor = anchor_id
        self.current_span = span

        overlay = self._ensure_overlay()
        overlay.clear()
        fragment = BeautifulSoup(
            render_tooltip_content(span, self.config.max_text_length), "html.parser"
        )
        for node in list(fragment.contents):
            overlay.append(node)

        self.state = VISIBLE
        self.reposition()
        logger.debug(f"Tooltip shown for {anchor_id}")

    def hide(self, delay: Optional[float] = None) -> None:
        """
        Hide the overlay.

        Args:
            delay: Seconds to wait. Defaults to the configured hide delay;
                zero or less hides immediately.
        """
        if delay is None:
            delay = self.config.hide_delay
        if self.state == HIDDEN:
            return

        self._cancel_hide()
        if delay <= 0:
            self._hide_now()
            return

        self.state = PENDING_HIDE
        self._hide_timer = self.scheduler.call_later(delay, self._hide_now)

    def toggle(self, anchor_id: str, span: AnnotationSpan) -> None:
        """Hide when already showing this anchor, otherwise show it."""
        if self.is_visible and self.current_anchor == anchor_id:
            self.hide(0)
        else:
            self.show(anchor_id, span)

    def overlay_enter(self) -> None:
        """Pointer entered the overlay: keep it open."""
        if self.state == PENDING_HIDE:
            self._cancel_hide()
            self.state = VISIBLE

    def overlay_leave(self) -> None:
        self.hide()

    def reposition(self) -> Optional[Placement]:
        """
        Recompute the overlay position for the current anchor.

        Returns:
            The new placement, or None when hidden or the anchor has no
            geometry.
        """
        if not self.is_visible or self.current_anchor is None or self.overlay is None:
            return None

        anchor = self.layout.anchor_rect(self.current_anchor)
        if anchor is None:
            logger.debug(f"No geometry for {self.current_anchor}")
            self._set_style(self.placement)
            return None

        width, height = self.layout.overlay_size()
        self.placement = compute_position(
            anchor,
            width,
            height,
            self.layout.viewport(),
            margin=self.config.placement_margin,
            viewport_margin=self.config.viewport_margin,
        )
        self._set_style(self.placement)
        return self.placement

    def on_document_click(self, target_id: Optional[str] = None) -> bool:
        """
        Handle a click anywhere in the document.

        Args:
            target_id: Id of the clicked element, if it has one.

        Returns:
            True if the click closed the overlay.
        """
        if not self.is_visible or self.current_anchor is None:
            return False
        if target_id is not None and self._inside_overlay_or_anchor(target_id):
            return False
        self.hide(0)
        return True

    def on_key(self, key: str) -> bool:
        """Escape closes the overlay. Returns True if it did."""
        if key == "Escape" and self.is_visible:
            self.hide(0)
            return True
        return False

    def destroy(self) -> None:
        """Remove the overlay and its stylesheet and cancel timers."""
        self._cancel_hide()
        if self.overlay is not None:
            self.overlay.decompose()
            self.overlay = None
        remove_stylesheet(self.soup, TOOLTIP_STYLES_ID)
        self.state = HIDDEN
        self.current_anchor = None
        self.current_span = None
        self.placement = None

    def _ensure_overlay(self) -> Tag:
        if self.overlay is not None:
            return self.overlay

        self.overlay = self.soup.new_tag(
            "div",
            attrs={"id": TOOLTIP_ID, "class": TOOLTIP_CLASS, IGNORE_ATTR: "true"},
        )
        parent = self.soup.body or self.soup
        parent.append(self.overlay)
        return self.overlay

    def _hide_now(self) -> None:
        self._hide_timer = None
        self.state = HIDDEN
        self.current_anchor = None
        self.current_span = None
        if self.overlay is not None:
            self.overlay["style"] = "display: none"

    def _cancel_hide(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.cancel()
            self._hide_timer = None

    def _set_style(self, placement: Optional[Placement]) -> None:
        if self.overlay is None:
            return
        if placement is None:
            self.overlay["style"] = "display: block"
        else:
            self.overlay["style"] = (
                f"left: {placement.left:g}px; top: {placement.top:g}px; display: block"
            )

    def _inside_overlay_or_anchor(self, target_id: str) -> bool:
        if target_id in (TOOLTIP_ID, self.current_anchor):
            return True
        target = self.soup.find(id=target_id)
        if target is None:
            return False
        for parent in target.parents:
            parent_id = parent.get("id") if isinstance(parent, Tag) else None
            if parent_id in (TOOLTIP_ID, self.current_anchor):
                return True
        return False
