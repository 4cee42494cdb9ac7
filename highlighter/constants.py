"""Element ids, class names and attribute names written into the document."""

MARKER_CLASS_PREFIX = "manipulation-highlight"
MARKER_BASE_CLASS = "manipulation-highlight-base"
MARKER_ID_PREFIX = "highlight"

STYLES_ID = "manipulation-detector-styles"
TOOLTIP_ID = "manipulation-detector-tooltip"
TOOLTIP_STYLES_ID = "manipulation-detector-tooltip-styles"
TOOLTIP_CLASS = "manipulation-tooltip"

# Subtrees carrying this attribute are never indexed (the tooltip overlay)
IGNORE_ATTR = "data-highlighter-ignore"
# Both halves of an element split by a marker boundary carry the same token
SPLIT_ATTR = "data-highlighter-split"

MODE_CLASSES = {
    "full-color": "full-color",
    "low-contrast": "low-contrast",
}
DEFAULT_MODE = "full-color"
