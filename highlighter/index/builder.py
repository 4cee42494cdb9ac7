"""Builds the offset-addressed text index of a document region."""

import logging
import re
from typing import Iterator, Optional

from bs4 import NavigableString, Tag

from ..config import IndexConfig
from ..constants import IGNORE_ATTR
from ..models import TextSegment
from ..utils.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

HIDDEN_STYLE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)


class TextIndex:
    """
    Ordered text segments of a tree region plus their concatenation.

    ``text`` is every segment's normalized text joined with one space, so
    segment ``k`` occupies ``text[segment.start_offset:segment.end_offset]``
    and the position right after it is the separator.
    """

    def __init__(self, segments: list[TextSegment]):
        self.segments = segments
        self.text = " ".join(segment.normalized_text for segment in segments)
        self._starts = [segment.start_offset for segment in segments]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[TextSegment]:
        return iter(self.segments)

    @property
    def starts(self) -> list[int]:
        return self._starts

    def context_around(self, position: int, context_length: int = 100) -> str:
        """Return normalized text surrounding ``position``."""
        start = max(0, position - context_length)
        end = min(len(self.text), position + context_length)
        return self.text[start:end]


class TextIndexBuilder:
    """
    Walks a tree region and collects its renderable text leaves.

    Only plain ``NavigableString`` leaves count; comments, doctypes and the
    string types bs4 uses inside script/style/template are skipped along
    with excluded and hidden subtrees.
    """

    def __init__(self, config: Optional[IndexConfig] = None):
        """
        Initialize the builder.

        Args:
            config: Index configuration. Defaults to IndexConfig().
        """
        self.config = config or IndexConfig()
        self.excluded_tags = {name.lower() for name in self.config.excluded_tags}

    def build(self, root: Tag) -> TextIndex:
        """
        Build a fresh index for ``root``.

        Args:
            root: Root of the region to index.

        Returns:
            TextIndex with contiguous segments.
        """
        segments: list[TextSegment] = []
        offset = 0

        for node in self.iter_text_nodes(root):
            raw_text = str(node)
            normalized = normalize_text(raw_text)
            if not normalized:
                continue

            segments.append(
                TextSegment(
                    node=node,
                    raw_text=raw_text,
                    normalized_text=normalized,
                    start_offset=offset,
                    end_offset=offset + len(normalized),
                )
            )
            # One separator position between consecutive segments
            offset += len(normalized) + 1

        index = TextIndex(segments)
        logger.debug(f"Indexed {len(segments)} segments ({len(index.text)} chars)")
        return index

    def iter_text_nodes(self, root: Tag) -> Iterator[NavigableString]:
        """Yield renderable text leaves under ``root`` in document order."""
        if self.is_excluded(root):
            return

        stack = list(reversed(list(root.children)))
        while stack:
            node = stack.pop()
            if type(node) is NavigableString:
                yield node
            elif isinstance(node, Tag):
                if self.is_excluded(node):
                    continue
                stack.extend(reversed(list(node.children)))

    def is_excluded(self, tag: Tag) -> bool:
        """Check whether a subtree is non-renderable or hidden."""
        if tag.name and tag.name.lower() in self.excluded_tags:
            return True
        if tag.has_attr(IGNORE_ATTR):
            return True
        if not self.config.skip_hidden:
            return False
        if tag.has_attr("hidden"):
            return True
        if str(tag.get("aria-hidden", "")).lower() == "true":
            return True
        style = tag.get("style")
        if style and HIDDEN_STYLE.search(str(style)):
            return True
        return False
