"""Data models for the annotation pipeline."""

from dataclasses import dataclass, field
from typing import Optional

from bs4 import NavigableString

from .taxonomy import ManipulationType, get_category


@dataclass
class AnnotationSpan:
    """A quotation reported by the classifier, with its category."""

    original_text: str
    manipulation_type: ManipulationType
    manipulation_description: str = ""
    confidence: float = 0.0

    @property
    def category(self) -> str:
        return get_category(self.manipulation_type)

    @classmethod
    def from_dict(cls, data: dict) -> "AnnotationSpan":
        """Create an AnnotationSpan from a classifier record.

        Raises:
            ValueError: If the manipulation type is unknown or the confidence
                is outside [0, 1].
        """
        try:
            manipulation_type = ManipulationType(data.get("manipulation_type"))
        except ValueError:
            raise ValueError(
                f"Unknown manipulation type: {data.get('manipulation_type')!r}"
            ) from None

        confidence = float(data.get("confidence", 0.0))
        if not 0.0 <= confidence <= 1.0:
            raise ValueError(f"Confidence out of range [0, 1]: {confidence}")

        return cls(
            original_text=str(data.get("original_text") or ""),
            manipulation_type=manipulation_type,
            manipulation_description=str(data.get("manipulation_description") or ""),
            confidence=confidence,
        )

    def to_dict(self) -> dict:
        """Convert to a classifier-shaped record."""
        return {
            "original_text": self.original_text,
            "manipulation_type": self.manipulation_type.value,
            "manipulation_description": self.manipulation_description,
            "confidence": self.confidence,
        }


@dataclass
class TextSegment:
    """A run of renderable text under one leaf node of the tree.

    Offsets are in the shared normalized coordinate space of a TextIndex.
    ``pieces`` lists the live leaves holding ``raw_text`` as
    (raw_start, node) pairs; it starts as the single original leaf and grows
    when a marker boundary splits the leaf during a pass.
    """

    node: NavigableString
    raw_text: str
    normalized_text: str
    start_offset: int
    end_offset: int
    pieces: list[tuple[int, NavigableString]] = field(default_factory=list)

    def __post_init__(self):
        if not self.pieces:
            self.pieces = [(0, self.node)]

    def __len__(self) -> int:
        return self.end_offset - self.start_offset

    def contains(self, offset: int) -> bool:
        return self.start_offset <= offset < self.end_offset

    def piece_index_at(self, raw_offset: int) -> int:
        """Index of the piece holding the character at ``raw_offset``."""
        index = 0
        for i, (piece_start, _) in enumerate(self.pieces):
            if piece_start <= raw_offset:
                index = i
            else:
                break
        return index

    def piece_bounds(self, index: int) -> tuple[int, int]:
        """Raw [start, end) covered by piece ``index``."""
        start = self.pieces[index][0]
        if index + 1 < len(self.pieces):
            end = self.pieces[index + 1][0]
        else:
            end = len(self.raw_text)
        return start, end


@dataclass
class NodeLocation:
    """A raw character position inside a segment's leaf text."""

    segment: TextSegment
    offset: int


@dataclass
class TextMatch:
    """An occurrence of a query in the index's normalized text."""

    start: int  # inclusive
    end: int  # exclusive
    text: str
    method: str = "exact"  # "exact" or "fuzzy"
    similarity: float = 1.0

    @property
    def is_approximate(self) -> bool:
        return self.method != "exact"


@dataclass
class MarkerRecord:
    """A materialized occurrence of a span.

    Holds no tree node: the wrapper element is looked up by ``marker_id``
    through the live tree whenever it is needed.
    """

    marker_id: str
    span: AnnotationSpan
    match: TextMatch
    method: str  # "wrap" or "extract"
    text: str = ""
    span_index: Optional[int] = None

    def to_dict(self, include_text: bool = True) -> dict:
        """Convert to dictionary for report output."""
        result = {
            "marker_id": self.marker_id,
            "span_index": self.span_index,
            "manipulation_type": self.span.manipulation_type.value,
            "category": self.span.category,
            "confidence": self.span.confidence,
            "match_method": self.match.method,
            "similarity": self.match.similarity,
            "materialize_method": self.method,
            "start": self.match.start,
            "end": self.match.end,
        }
        if include_text:
            result["original_text"] = self.span.original_text
            result["marker_text"] = self.text
            result["manipulation_description"] = self.span.manipulation_description
        return result
