"""Tracks the markers created by one annotation pass."""

import logging
import uuid
from collections import Counter
from typing import Optional

from bs4 import Tag
from tqdm import tqdm

from .config import HighlightConfig, IndexConfig, MatchingConfig
from .constants import MARKER_BASE_CLASS, MARKER_ID_PREFIX
from .errors import LocateFailure, MaterializeError, OverlapConflict
from .index.builder import TextIndex, TextIndexBuilder
from .markup.events import EventBindings, MarkerHandlers
from .markup.materializer import RangeMaterializer
from .markup.tree import merge_split_elements
from .matching.locator import SpanLocator
from .models import AnnotationSpan, MarkerRecord, TextMatch
from .styles import marker_classes, resolve_mode
from .taxonomy import MANIPULATION_CATEGORIES

logger = logging.getLogger(__name__)


class AnnotationRegistry:
    """
    Applies spans to a tree region and remembers the resulting markers.

    Records hold marker ids only. The marker elements themselves are looked
    up through the live tree whenever they are needed, so a record whose
    element was removed by someone else is simply skipped.
    """

    def __init__(
        self,
        index_config: Optional[IndexConfig] = None,
        matching_config: Optional[MatchingConfig] = None,
        highlight_config: Optional[HighlightConfig] = None,
        bindings: Optional[EventBindings] = None,
        handlers: Optional[MarkerHandlers] = None,
    ):
        """
        Initialize the registry.

        Args:
            index_config: Text index configuration.
            matching_config: Span locator configuration.
            highlight_config: Marker presentation configuration.
            bindings: Event table shared with the controller.
            handlers: Tooltip operations bound to every marker.
        """
        self.builder = TextIndexBuilder(index_config)
        self.locator = SpanLocator(matching_config)
        self.highlight_config = highlight_config or HighlightConfig()
        self.bindings = bindings if bindings is not None else EventBindings()
        self.handlers = handlers

        self.mode = self.highlight_config.mode
        self.span_count = 0
        self.last_index: Optional[TextIndex] = None
        self._records: dict[str, MarkerRecord] = {}

    def apply(
        self,
        root: Tag,
        spans: list[AnnotationSpan],
        mode: Optional[str] = None,
    ) -> list[MarkerRecord]:
        """
        Clear previous markers and annotate ``root`` with ``spans``.

        Spans that cannot be located, occurrences that overlap an existing
        marker and occurrences that cannot be wrapped are skipped.

        Args:
            root: Region to annotate.
            spans: Spans to apply, in order.
            mode: Presentation mode. Defaults to the configured mode.

        Returns:
            Records of the markers created in this pass.
        """
        mode = resolve_mode(mode or self.mode)
        self.clear(root)
        self.mode = mode
        self.span_count = len(spans)

        index = self.builder.build(root)
        self.last_index = index
        materializer = RangeMaterializer(
            index,
            marker_tag=self.highlight_config.marker_tag,
            bindings=self.bindings,
            handlers=self.handlers,
        )
        nonce = uuid.uuid4().hex[:8]

        created = []
        skipped = 0
        for i, span in enumerate(
            tqdm(spans, desc="Annotating spans", disable=not self.highlight_config.show_progress)
        ):
            try:
                matches = self._locate(span, index)
            except LocateFailure as e:
                logger.debug(str(e))
                skipped += 1
                continue

            for j, match in enumerate(matches):
                marker_id = f"{MARKER_ID_PREFIX}-{i}-{j}-{nonce}"
                try:
                    record = materializer.materialize(match, span, marker_id, mode)
                except OverlapConflict as e:
                    logger.debug(f"Skipping {marker_id}: {e}")
                    continue
                except MaterializeError as e:
                    logger.warning(f"Could not highlight occurrence {j} of span {i}: {e}")
                    continue

                record.span_index = i
                self._records[marker_id] = record
                created.append(record)

        logger.info(
            f"Created {len(created)} markers for {len(spans)} spans "
            f"({skipped} spans not found)"
        )
        return created

    def _locate(self, span: AnnotationSpan, index: TextIndex) -> list[TextMatch]:
        matches = self.locator.locate(span.original_text, index.text)
        if not matches:
            raise LocateFailure(f"Could not find text for {span.manipulation_type}: "
                                f"{span.original_text[:50]!r}")
        return matches

    def clear(self, root: Tag) -> int:
        """
        Remove every recorded marker from ``root``.

        Markers are unwrapped in place, element halves split for them are
        re-joined and adjacent text leaves are merged. Safe to call
        repeatedly and on trees changed by someone else.

        Returns:
            Number of markers removed from the tree.
        """
        if not self._records:
            return 0

        marker_ids = set(self._records)
        removed = 0
        for marker_id in self._records:
            marker = root.find(id=marker_id)
            if marker is None:
                logger.debug(f"Marker {marker_id} no longer in the document")
                continue
            marker.unwrap()
            removed += 1

        merge_split_elements(root, marker_ids)
        root.smooth()

        for marker_id in marker_ids:
            self.bindings.unbind(marker_id)
        self._records.clear()

        logger.debug(f"Cleared {removed} markers")
        return removed

    def update_mode(self, root: Tag, mode: str) -> int:
        """
        Switch the presentation mode of existing markers without re-matching.

        Returns:
            Number of markers updated.
        """
        mode = resolve_mode(mode)
        self.mode = mode
        updated = 0
        for marker_id, record in self._records.items():
            marker = root.find(id=marker_id)
            if marker is None:
                continue
            marker["class"] = marker_classes(record.span.manipulation_type, mode)
            updated += 1
        return updated

    @property
    def markers(self) -> list[MarkerRecord]:
        return list(self._records.values())

    def get(self, marker_id: str) -> Optional[MarkerRecord]:
        return self._records.get(marker_id)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, marker_id: str) -> bool:
        return marker_id in self._records

    def counts_by_type(self) -> dict[str, int]:
        """Number of markers per manipulation type."""
        counts = Counter(record.span.manipulation_type.value for record in self._records.values())
        return dict(counts)

    def counts_by_category(self) -> dict[str, int]:
        """Number of markers per category, with every category present."""
        counts = {category: 0 for category in MANIPULATION_CATEGORIES}
        for record in self._records.values():
            category = record.span.category
            counts[category] = counts.get(category, 0) + 1
        return counts


def strip_markers(root: Tag) -> int:
    """
    Remove markers left in a document by an earlier run.

    Unlike ``AnnotationRegistry.clear`` this needs no records: markers are
    found by their base class.

    Returns:
        Number of markers removed.
    """
    markers = root.find_all(class_=MARKER_BASE_CLASS)
    marker_ids = {str(marker.get("id")) for marker in markers if marker.get("id")}
    for marker in markers:
        marker.unwrap()
    merge_split_elements(root, marker_ids)
    root.smooth()
    logger.debug(f"Stripped {len(markers)} markers")
    return len(markers)
