"""Entry point tying the annotation pipeline to one document."""

import logging
from datetime import datetime
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from .config import Config
from .constants import STYLES_ID
from .markup.events import EventBindings
from .models import AnnotationSpan
from .registry import AnnotationRegistry
from .styles import inject_highlight_styles, remove_stylesheet
from .tooltip.layout import LayoutProvider
from .tooltip.manager import TooltipManager
from .tooltip.scheduler import Scheduler

logger = logging.getLogger(__name__)

SpanInput = Union[AnnotationSpan, dict]


class HighlightController:
    """
    Applies classifier spans to a parsed document and manages the overlay.

    Example:
        >>> soup = BeautifulSoup(html, "lxml")
        >>> controller = HighlightController(soup)
        >>> controller.apply_annotations(spans, presentation_mode="low-contrast")
        3
        >>> controller.clear_annotations()
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        config: Optional[Config] = None,
        layout: Optional[LayoutProvider] = None,
        scheduler: Optional[Scheduler] = None,
        region_selector: Optional[str] = None,
    ):
        """
        Initialize the controller and inject the shared stylesheets.

        Args:
            soup: Parsed document.
            config: Configuration. Defaults to Config().
            layout: Geometry source for the tooltip.
            scheduler: Timer source for the tooltip hide delay.
            region_selector: CSS selector of the region to annotate.
                Defaults to ``config.region_selector``.
        """
        self.soup = soup
        self.config = config or Config()
        self.region_selector = region_selector or self.config.region_selector

        self.bindings = EventBindings()
        self.tooltip = TooltipManager(soup, self.config.tooltip, layout, scheduler)
        self.registry = AnnotationRegistry(
            index_config=self.config.index,
            matching_config=self.config.matching,
            highlight_config=self.config.highlight,
            bindings=self.bindings,
            handlers=self.tooltip,
        )

        inject_highlight_styles(soup)

    @property
    def root(self) -> Tag:
        """Region the annotations are applied to."""
        region = self.soup.select_one(self.region_selector)
        if region is None:
            logger.debug(f"No element matches {self.region_selector!r}, using the whole document")
            return self.soup
        return region

    def apply_annotations(
        self,
        spans: list[SpanInput],
        presentation_mode: Optional[str] = None,
    ) -> int:
        """
        Replace the current annotations with markers for ``spans``.

        Invalid span records, unmatched spans and occurrences that cannot be
        wrapped are logged and skipped.

        Args:
            spans: AnnotationSpan objects or dicts with the classifier fields.
            presentation_mode: "full-color" or "low-contrast". Defaults to the
                configured mode; unknown values fall back to "full-color".

        Returns:
            Number of markers created.
        """
        annotation_spans = []
        for i, span in enumerate(spans):
            if isinstance(span, AnnotationSpan):
                annotation_spans.append(span)
                continue
            try:
                annotation_spans.append(AnnotationSpan.from_dict(span))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping invalid span {i}: {e}")

        self.tooltip.hide(0)
        records = self.registry.apply(self.root, annotation_spans, presentation_mode)
        return len(records)

    def clear_annotations(self) -> int:
        """Remove every marker and restore the annotated region."""
        self.tooltip.hide(0)
        return self.registry.clear(self.root)

    def update_mode(self, presentation_mode: str) -> int:
        """Switch existing markers to another presentation mode."""
        return self.registry.update_mode(self.root, presentation_mode)

    @property
    def highlight_count(self) -> int:
        return len(self.registry)

    def counts_by_type(self) -> dict[str, int]:
        return self.registry.counts_by_type()

    def summary(self) -> dict:
        """Marker counts of the current pass, by category."""
        return {
            "total_spans": self.registry.span_count,
            "total_markers": len(self.registry),
            "by_category": self.registry.counts_by_category(),
            "by_type": self.registry.counts_by_type(),
            "analysis_date": datetime.now().isoformat(),
        }

    # Events reported by the host

    def dispatch(self, marker_id: str, event_type: str) -> bool:
        """Route a pointer event on a marker to its bound handler."""
        return self.bindings.dispatch(marker_id, event_type)

    def handle_document_click(self, target_id: Optional[str] = None) -> bool:
        return self.tooltip.on_document_click(target_id)

    def handle_key(self, key: str) -> bool:
        return self.tooltip.on_key(key)

    def handle_scroll(self) -> None:
        self.tooltip.reposition()

    def handle_resize(self) -> None:
        self.tooltip.reposition()

    def unload(self) -> None:
        """Clear annotations and remove the overlay and every stylesheet."""
        self.clear_annotations()
        self.tooltip.destroy()
        remove_stylesheet(self.soup, STYLES_ID)
        self.bindings.clear()
