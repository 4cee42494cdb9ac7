"""HTML body of the tooltip overlay."""

from html import escape

from ..models import AnnotationSpan
from ..taxonomy import MANIPULATION_COLORS, format_manipulation_type
from ..utils.text_normalizer import truncate_text

FOOTER_HINT = "Click to pin/unpin this tooltip"


def render_tooltip_content(span: AnnotationSpan, max_text_length: int = 150) -> str:
    """
    Render the overlay markup for a span.

    Every piece of classifier-supplied text is HTML-escaped.

    Args:
        span: Span under the pointer.
        max_text_length: Longest quoted text shown before truncation.

    Returns:
        HTML fragment.
    """
    color = MANIPULATION_COLORS.get(span.manipulation_type, "#007acc")
    percentage = round(span.confidence * 100)
    quoted = escape(truncate_text(span.original_text, max_text_length))

    return (
        f'<div class="tooltip-header" style="border-left-color: {color}">'
        f'<div class="tooltip-type">{escape(format_manipulation_type(span.manipulation_type))}</div>'
        f'<div class="tooltip-category">{escape(span.category)}</div>'
        "</div>"
        '<div class="tooltip-content">'
        f'<div class="tooltip-description">{escape(span.manipulation_description)}</div>'
        '<div class="tooltip-confidence">'
        '<div class="confidence-label">Confidence:</div>'
        '<div class="confidence-bar">'
        f'<div class="confidence-fill" style="width: {percentage}%; background-color: {color}"></div>'
        "</div>"
        f'<div class="confidence-value">{percentage}%</div>'
        "</div>"
        '<div class="tooltip-original-text">'
        '<div class="original-text-label">Detected text:</div>'
        f'<div class="original-text-content">"{quoted}"</div>'
        "</div>"
        "</div>"
        '<div class="tooltip-footer">'
        f'<div class="tooltip-tip">{FOOTER_HINT}</div>'
        "</div>"
    )
