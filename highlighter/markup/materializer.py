"""Turns located matches into marker elements in the document tree."""

import logging
from typing import Optional

from bs4 import NavigableString, Tag

from ..constants import MARKER_BASE_CLASS
from ..errors import MaterializeError, OverlapConflict
from ..index.builder import TextIndex
from ..index.mapper import CoordinateMapper
from ..models import AnnotationSpan, MarkerRecord, NodeLocation, TextMatch
from ..styles import marker_classes
from . import tree
from .events import EventBindings, MarkerHandlers

logger = logging.getLogger(__name__)


class RangeMaterializer:
    """
    Wraps located text ranges in marker elements.

    The primary construction wraps the range's sibling nodes in place. When
    the range partially covers an element, the fallback splits the covered
    elements, extracts the range as a fragment, and reinserts it inside the
    marker at the original position.
    """

    def __init__(
        self,
        index: TextIndex,
        marker_tag: str = "span",
        bindings: Optional[EventBindings] = None,
        handlers: Optional[MarkerHandlers] = None,
    ):
        """
        Initialize the materializer for one classification pass.

        Args:
            index: Text index built for this pass.
            marker_tag: Element name used for markers.
            bindings: Event table that receives the marker's handlers.
            handlers: Tooltip operations the handlers call.
        """
        self.index = index
        self.mapper = CoordinateMapper(index)
        self.marker_tag = marker_tag
        self.bindings = bindings
        self.handlers = handlers
        self._positions = {id(segment): i for i, segment in enumerate(index.segments)}

    def materialize(
        self,
        match: TextMatch,
        span: AnnotationSpan,
        marker_id: str,
        mode: str,
    ) -> MarkerRecord:
        """
        Create a marker for one match.

        Args:
            match: Located occurrence in the index's normalized text.
            span: Span the marker represents.
            marker_id: Unique id for the marker element.
            mode: Presentation mode ("full-color" or "low-contrast").

        Returns:
            Record of the created marker.

        Raises:
            OverlapConflict: If the range intersects an existing marker.
            MaterializeError: If the range cannot be wrapped.
        """
        resolved = self.mapper.resolve(match)
        if resolved is None:
            raise MaterializeError(f"Could not map match [{match.start}, {match.end})")
        start, end_inclusive = resolved
        end = NodeLocation(segment=end_inclusive.segment, offset=end_inclusive.offset + 1)

        if self.intersects_marker(start, end):
            raise OverlapConflict(f"Match [{match.start}, {match.end}) overlaps a marker")

        # Decide the construction before touching the tree
        first_piece = self._piece_at(start.segment, start.offset)
        last_piece = self._piece_at(end.segment, end.offset - 1)
        try:
            tree.check_surroundable(first_piece, last_piece)
            method = "wrap"
        except tree.PartialBoundaryError:
            logger.debug(f"Cannot wrap {marker_id} in place, using extraction")
            tree.check_extractable(first_piece, last_piece)
            method = "extract"

        soup = tree.owner_document(first_piece)
        if soup is None:
            raise MaterializeError("Boundary is not attached to a document")

        tree.ensure_piece_boundary(end.segment, end.offset)
        tree.ensure_piece_boundary(start.segment, start.offset)
        first = self._piece_at(start.segment, start.offset)
        last = self._piece_at(end.segment, end.offset - 1)

        marker = self.create_marker(soup, span, marker_id, mode, match.method)
        if method == "wrap":
            tree.surround_contents(first, last, marker)
        else:
            ancestor, position, fragment = tree.extract_contents(soup, first, last, marker_id)
            for node in fragment:
                marker.append(node)
            ancestor.insert(position, marker)

        if self.bindings is not None and self.handlers is not None:
            self.bindings.bind_marker(marker_id, span, self.handlers)

        return MarkerRecord(
            marker_id=marker_id,
            span=span,
            match=match,
            method=method,
            text=marker.get_text(),
        )

    def create_marker(
        self,
        soup,
        span: AnnotationSpan,
        marker_id: str,
        mode: str,
        match_method: str = "exact",
    ) -> Tag:
        """Build an empty marker element carrying the span's attributes."""
        return soup.new_tag(
            self.marker_tag,
            attrs={
                "id": marker_id,
                "class": marker_classes(span.manipulation_type, mode),
                "data-manipulation-type": span.manipulation_type.value,
                "data-manipulation-description": span.manipulation_description,
                "data-confidence": str(span.confidence),
                "data-match-method": match_method,
            },
        )

    def intersects_marker(self, start: NodeLocation, end: NodeLocation) -> bool:
        """Check whether any live leaf in [start, end) sits inside a marker."""
        for node in self._covered_pieces(start, end):
            if node.find_parent(class_=MARKER_BASE_CLASS) is not None:
                return True
        return False

    def _covered_pieces(self, start: NodeLocation, end: NodeLocation) -> list[NavigableString]:
        first = self._positions[id(start.segment)]
        last = self._positions[id(end.segment)]
        nodes = []
        for position in range(first, last + 1):
            segment = self.index.segments[position]
            low = start.offset if position == first else 0
            high = end.offset if position == last else len(segment.raw_text)
            for i, (_, node) in enumerate(segment.pieces):
                piece_start, piece_end = segment.piece_bounds(i)
                if piece_start < high and piece_end > low:
                    nodes.append(node)
        return nodes

    @staticmethod
    def _piece_at(segment, raw_offset: int) -> NavigableString:
        return segment.pieces[segment.piece_index_at(raw_offset)][1]
