"""Maps normalized offsets back to (segment, raw offset) locations."""

from bisect import bisect_right
from typing import Optional

from ..models import NodeLocation, TextMatch
from ..utils.text_normalizer import denormalize_offset
from .builder import TextIndex


class CoordinateMapper:
    """Resolves positions in ``TextIndex.text`` to leaf text positions."""

    def __init__(self, index: TextIndex):
        """
        Initialize the mapper.

        Args:
            index: Text index whose coordinate space offsets refer to.
        """
        self.index = index

    def locate(self, offset: int) -> Optional[NodeLocation]:
        """
        Find the leaf position of a normalized offset.

        Args:
            offset: Offset into ``index.text``.

        Returns:
            NodeLocation, or None when the offset is out of range or falls on
            a separator between segments.
        """
        segments = self.index.segments
        if offset < 0 or not segments:
            return None

        position = bisect_right(self.index.starts, offset) - 1
        if position < 0:
            return None

        segment = segments[position]
        if not segment.contains(offset):
            return None

        relative = offset - segment.start_offset
        raw_offset = denormalize_offset(segment.raw_text, relative)
        return NodeLocation(segment=segment, offset=min(raw_offset, len(segment.raw_text)))

    def resolve(self, match: TextMatch) -> Optional[tuple[NodeLocation, NodeLocation]]:
        """
        Resolve both ends of a match.

        The end location points at the match's last character (inclusive).

        Returns:
            (start, end) locations, or None if either end cannot be mapped.
        """
        if match.end <= match.start:
            return None

        start = self.locate(match.start)
        end = self.locate(match.end - 1)
        if start is None or end is None:
            return None
        return start, end
