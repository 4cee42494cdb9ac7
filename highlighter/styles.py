"""Marker class lookup and the shared stylesheets injected into a document."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .constants import (
    DEFAULT_MODE,
    MARKER_BASE_CLASS,
    MARKER_CLASS_PREFIX,
    MODE_CLASSES,
    STYLES_ID,
    TOOLTIP_CLASS,
    TOOLTIP_STYLES_ID,
)
from .taxonomy import MANIPULATION_COLORS, ManipulationType

logger = logging.getLogger(__name__)

# Category -> presentation is a fixed table keyed by the closed enumeration
HIGHLIGHT_CLASSES: dict[ManipulationType, str] = {
    manipulation_type: f"{MARKER_CLASS_PREFIX}-{manipulation_type.value}"
    for manipulation_type in ManipulationType
}


def resolve_mode(mode: Optional[str]) -> str:
    """Return a known presentation mode, falling back to full-color."""
    if mode in MODE_CLASSES:
        return mode
    logger.warning(f"Unknown highlight mode {mode!r}, using {DEFAULT_MODE}")
    return DEFAULT_MODE


def marker_classes(manipulation_type: ManipulationType, mode: str) -> list[str]:
    """CSS classes for a marker of the given type in the given mode."""
    return [HIGHLIGHT_CLASSES[manipulation_type], MODE_CLASSES[mode], MARKER_BASE_CLASS]


def hex_to_rgba(hex_color: str, alpha: float) -> str:
    """Convert ``#RRGGBB`` to an ``rgba()`` expression."""
    r = int(hex_color[1:3], 16)
    g = int(hex_color[3:5], 16)
    b = int(hex_color[5:7], 16)
    return f"rgba({r}, {g}, {b}, {alpha})"


def generate_highlight_css() -> str:
    """Build the marker stylesheet: base rules plus one pair per type."""
    parts = [
        f"""
.{MARKER_BASE_CLASS} {{
  cursor: help;
  transition: all 0.2s ease;
  border-radius: 2px;
  position: relative;
  display: inline;
  line-height: inherit;
}}
.{MARKER_BASE_CLASS}:hover {{
  filter: brightness(0.9);
  transform: translateY(-1px);
  box-shadow: 0 2px 4px rgba(0,0,0,0.1);
}}"""
    ]

    for manipulation_type, color in MANIPULATION_COLORS.items():
        class_name = HIGHLIGHT_CLASSES[manipulation_type]
        parts.append(
            f"""
.{class_name}.full-color {{
  background-color: {hex_to_rgba(color, 0.25)};
  border-bottom: 2px solid {color};
  box-shadow: 0 1px 2px {hex_to_rgba(color, 0.3)};
}}
.{class_name}.low-contrast {{
  background-color: rgba(128, 128, 128, 0.1);
  border-bottom: 1px dotted #888;
}}"""
        )

    return "\n".join(parts) + "\n"


def generate_tooltip_css() -> str:
    """Build the tooltip stylesheet."""
    return f"""
.{TOOLTIP_CLASS} {{
  position: absolute;
  z-index: 10000;
  background: #ffffff;
  border: 1px solid #e0e0e0;
  border-radius: 8px;
  box-shadow: 0 4px 12px rgba(0, 0, 0, 0.15);
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  font-size: 14px;
  line-height: 1.4;
  max-width: 320px;
  min-width: 250px;
  display: none;
}}
.tooltip-header {{ padding: 12px 16px 8px; border-left: 4px solid #007acc; background: #f8f9fa; }}
.tooltip-type {{ font-weight: 600; color: #333; }}
.tooltip-category {{ font-size: 12px; color: #666; text-transform: uppercase; }}
.tooltip-content {{ padding: 12px 16px; }}
.tooltip-description {{ color: #444; margin-bottom: 12px; }}
.tooltip-confidence {{ display: flex; align-items: center; gap: 8px; margin-bottom: 12px; }}
.confidence-bar {{ flex: 1; height: 6px; background: #e0e0e0; border-radius: 3px; overflow: hidden; }}
.confidence-fill {{ height: 100%; border-radius: 3px; }}
.original-text-content {{ font-style: italic; color: #555; background: #f5f5f5; padding: 8px; }}
.tooltip-footer {{ padding: 8px 16px 12px; border-top: 1px solid #f0f0f0; }}
.tooltip-tip {{ font-size: 11px; color: #888; text-align: center; }}
@media (prefers-color-scheme: dark) {{
  .{TOOLTIP_CLASS} {{ background: #2d2d2d; border-color: #444; color: #e0e0e0; }}
  .tooltip-header {{ background: #3a3a3a; }}
}}
"""


def _head_of(soup: BeautifulSoup) -> Tag:
    head = soup.head
    if head is not None:
        return head

    head = soup.new_tag("head")
    html = soup.html
    if html is not None:
        html.insert(0, head)
    else:
        soup.insert(0, head)
    return head


def inject_stylesheet(soup: BeautifulSoup, style_id: str, css: str) -> bool:
    """
    Add a ``<style>`` element to the document head once.

    Args:
        soup: Document to modify.
        style_id: Element id used as the existence guard.
        css: Stylesheet text.

    Returns:
        True if the stylesheet was added, False if it already existed.
    """
    if soup.find(id=style_id) is not None:
        return False

    style = soup.new_tag("style", attrs={"id": style_id})
    style.string = css
    _head_of(soup).append(style)
    logger.debug(f"Injected stylesheet {style_id}")
    return True


def remove_stylesheet(soup: BeautifulSoup, style_id: str) -> bool:
    """Remove a stylesheet added by inject_stylesheet; True if one was removed."""
    style = soup.find(id=style_id)
    if style is None:
        return False
    style.decompose()
    return True


def inject_highlight_styles(soup: BeautifulSoup) -> bool:
    return inject_stylesheet(soup, STYLES_ID, generate_highlight_css())


def inject_tooltip_styles(soup: BeautifulSoup) -> bool:
    return inject_stylesheet(soup, TOOLTIP_STYLES_ID, generate_tooltip_css())
