"""Tests for tooltip placement, content and state."""

import asyncio

import pytest
from bs4 import BeautifulSoup

from highlighter.config import TooltipConfig
from highlighter.constants import TOOLTIP_ID, TOOLTIP_STYLES_ID
from highlighter.models import AnnotationSpan
from highlighter.taxonomy import ManipulationType
from highlighter.tooltip import (
    HIDDEN,
    PENDING_HIDE,
    VISIBLE,
    AsyncioScheduler,
    ManualScheduler,
    Rect,
    StaticLayout,
    TooltipManager,
    Viewport,
    compute_position,
    render_tooltip_content,
)


def make_soup() -> BeautifulSoup:
    return BeautifulSoup(
        '<html><head></head><body><p>The <span id="a1">sky</span> is '
        '<span id="a2">falling</span></p></body></html>',
        "lxml",
    )


def make_span(**overrides) -> AnnotationSpan:
    data = {
        "original_text": "you should be very afraid",
        "manipulation_type": ManipulationType.FEAR_MONGERING,
        "manipulation_description": "Creates a sense of danger",
        "confidence": 0.9,
    }
    data.update(overrides)
    return AnnotationSpan(**data)


def make_manager(soup=None, **config):
    soup = soup or make_soup()
    layout = StaticLayout(viewport_width=1280, viewport_height=800,
                          overlay_width=300, overlay_height=200)
    layout.set_anchor_rect("a1", Rect(left=500, top=400, width=100, height=20))
    layout.set_anchor_rect("a2", Rect(left=700, top=400, width=100, height=20))
    scheduler = ManualScheduler()
    manager = TooltipManager(soup, TooltipConfig(**config), layout, scheduler)
    return manager, layout, scheduler


class TestComputePosition:
    """Tests for overlay placement fallbacks."""

    def test_above(self):
        """Test the tooltip prefers the space above the anchor."""
        placement = compute_position(Rect(500, 400, 100, 20), 300, 200, Viewport(1280, 800))
        assert (placement.left, placement.top, placement.side) == (400, 190, "above")

    def test_below_when_no_room_above(self):
        """Test placement below when there is no room above."""
        placement = compute_position(Rect(500, 100, 100, 20), 300, 200, Viewport(1280, 800))
        assert (placement.left, placement.top, placement.side) == (400, 130, "below")

    def test_right_when_no_room_above_or_below(self):
        """Test placement to the right as the third choice."""
        placement = compute_position(Rect(500, 100, 100, 20), 300, 200, Viewport(1280, 300))
        assert (placement.left, placement.top, placement.side) == (610, 10, "right")

    def test_left_when_right_overflows(self):
        """Test placement to the left when the right overflows."""
        placement = compute_position(Rect(600, 100, 100, 20), 300, 200, Viewport(800, 300))
        assert (placement.left, placement.top, placement.side) == (290, 10, "left")

    def test_scroll_offset_and_clamp(self):
        """Test scroll offset is added and the result clamped."""
        viewport = Viewport(1280, 800, scroll_x=0, scroll_y=1000)
        placement = compute_position(Rect(0, 400, 20, 20), 300, 200, viewport)
        assert placement.left == 5
        assert placement.top == 1190


class TestTooltipContent:
    """Tests for the rendered overlay markup."""

    def test_fields(self):
        """Test the content shows type, category and confidence."""
        html = render_tooltip_content(make_span())
        assert "Fear Mongering" in html
        assert "Emotional Manipulation" in html
        assert "Creates a sense of danger" in html
        assert "90%" in html
        assert "Click to pin/unpin this tooltip" in html

    def test_escapes_text(self):
        """Test classifier text is HTML escaped."""
        html = render_tooltip_content(make_span(manipulation_description="<script>x</script>"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_truncates_quoted_text(self):
        """Test long quotes are truncated."""
        html = render_tooltip_content(make_span(original_text="a" * 200), max_text_length=150)
        fragment = BeautifulSoup(html, "html.parser")
        quoted = fragment.find(class_="original-text-content").get_text()
        assert quoted == '"' + "a" * 147 + '..."'


class TestTooltipManager:
    """Tests for overlay state transitions."""

    def test_injects_styles_once(self):
        """Test the tooltip stylesheet is injected once."""
        soup = make_soup()
        make_manager(soup)
        make_manager(soup)
        assert len(soup.find_all(id=TOOLTIP_STYLES_ID)) == 1

    def test_show(self):
        """Test showing the tooltip for a marker."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span())

        assert manager.state == VISIBLE
        assert manager.overlay["id"] == TOOLTIP_ID
        assert manager.overlay.has_attr("data-highlighter-ignore")
        assert "Fear Mongering" in manager.overlay.get_text()
        assert manager.overlay["style"] == "left: 400px; top: 190px; display: block"

    def test_escaped_description_is_not_markup(self):
        """Test a hostile description stays text."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span(manipulation_description="<script>alert(1)</script>"))

        assert manager.overlay.find("script") is None
        assert "<script>alert(1)</script>" in manager.overlay.get_text()

    def test_delayed_hide(self):
        """Test hiding waits for the delay."""
        manager, _, scheduler = make_manager()
        manager.show("a1", make_span())
        manager.hide()

        assert manager.state == PENDING_HIDE
        scheduler.advance(0.2)
        assert manager.state == PENDING_HIDE
        scheduler.advance(0.2)
        assert manager.state == HIDDEN
        assert manager.overlay["style"] == "display: none"

    def test_immediate_hide(self):
        """Test hide(0) hides at once."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span())
        manager.hide(0)
        assert manager.state == HIDDEN

    def test_show_cancels_pending_hide(self):
        """Test showing again cancels a pending hide."""
        manager, _, scheduler = make_manager()
        manager.show("a1", make_span())
        manager.hide()
        manager.show("a2", make_span())
        scheduler.advance(1.0)

        assert manager.state == VISIBLE
        assert manager.current_anchor == "a2"

    def test_overlay_hover_keeps_it_open(self):
        """Test hovering the overlay keeps it visible."""
        manager, _, scheduler = make_manager()
        manager.show("a1", make_span())
        manager.hide()
        manager.overlay_enter()
        scheduler.advance(1.0)
        assert manager.state == VISIBLE

        manager.overlay_leave()
        assert manager.state == PENDING_HIDE
        scheduler.advance(1.0)
        assert manager.state == HIDDEN

    def test_toggle(self):
        """Test click toggles the tooltip."""
        manager, _, _ = make_manager()
        manager.toggle("a1", make_span())
        assert manager.state == VISIBLE

        manager.toggle("a2", make_span())
        assert manager.state == VISIBLE
        assert manager.current_anchor == "a2"

        manager.toggle("a2", make_span())
        assert manager.state == HIDDEN

    def test_click_outside_hides(self):
        """Test clicking outside hides the tooltip."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span())

        assert manager.on_document_click("a1") is False
        assert manager.on_document_click(TOOLTIP_ID) is False
        assert manager.state == VISIBLE

        assert manager.on_document_click("a2") is True
        assert manager.state == HIDDEN

    def test_click_without_target_hides(self):
        """Test a click with no target hides the tooltip."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span())
        assert manager.on_document_click(None) is True

    def test_escape_hides(self):
        """Test Escape hides the tooltip."""
        manager, _, _ = make_manager()
        manager.show("a1", make_span())

        assert manager.on_key("Enter") is False
        assert manager.on_key("Escape") is True
        assert manager.state == HIDDEN

    def test_reposition_on_scroll(self):
        """Test the tooltip follows scrolling."""
        manager, layout, _ = make_manager()
        manager.show("a1", make_span())

        layout.scroll_to(0, 300)
        placement = manager.reposition()
        assert placement.top == 490
        assert manager.overlay["style"] == "left: 400px; top: 490px; display: block"

    def test_reposition_on_resize(self):
        """Test the tooltip is re-clamped on resize."""
        manager, layout, _ = make_manager()
        manager.show("a1", make_span())

        layout.resize(1280, 300)
        layout.set_overlay_size(300, 100)
        placement = manager.reposition()
        assert (placement.left, placement.top) == (400, 195)

    def test_reposition_when_hidden(self):
        """Test repositioning a hidden tooltip does nothing."""
        manager, _, _ = make_manager()
        assert manager.reposition() is None

    def test_destroy(self):
        """Test destroy removes the overlay."""
        soup = make_soup()
        manager, _, scheduler = make_manager(soup)
        manager.show("a1", make_span())
        manager.hide()
        manager.destroy()

        assert soup.find(id=TOOLTIP_ID) is None
        assert soup.find(id=TOOLTIP_STYLES_ID) is None
        assert manager.state == HIDDEN
        assert scheduler.pending == 0
        assert scheduler.advance(1.0) == 0


class TestAsyncioScheduler:
    """Tests for the event-loop backed scheduler."""

    def test_hide_runs_on_loop(self):
        """Test the asyncio scheduler runs the delayed hide."""
        async def scenario():
            manager = TooltipManager(
                make_soup(), TooltipConfig(hide_delay=0.01), scheduler=AsyncioScheduler()
            )
            manager.show("a1", make_span())
            manager.hide()
            assert manager.state == PENDING_HIDE
            await asyncio.sleep(0.05)
            return manager.state

        assert asyncio.run(scenario()) == HIDDEN


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
