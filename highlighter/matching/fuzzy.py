"""Word-window fuzzy locating strategy."""

import logging
import re
from typing import Iterable

from ..models import TextMatch
from ..utils.text_normalizer import count_words, split_words
from .base import LocatorStrategy

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"\S+")


def jaccard_similarity(words_a: Iterable[str], words_b: Iterable[str]) -> float:
    """
    Jaccard similarity of two word collections, case-insensitive.

    Word order and repeated words are ignored.

    Args:
        words_a: First word collection.
        words_b: Second word collection.

    Returns:
        |A & B| / |A | B|, or 0.0 when both are empty.
    """
    set_a = {word.lower() for word in words_a}
    set_b = {word.lower() for word in words_b}
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


class FuzzyLocator(LocatorStrategy):
    """
    Slides a word window over the text and keeps windows similar to the query.

    The window spans ``min(2 * query_words, max_window)`` words and advances
    one word at a time. Every window with word-set Jaccard similarity at or
    above the threshold is reported; overlapping windows are not merged.
    """

    method = "fuzzy"

    def __init__(
        self,
        threshold: float = 0.7,
        min_words: int = 3,
        min_chars: int = 10,
        max_window: int = 20,
    ):
        """
        Initialize the fuzzy locator.

        Args:
            threshold: Minimum Jaccard similarity (0.0 to 1.0).
            min_words: Queries with fewer words are never fuzzy matched.
            min_chars: Queries shorter than this are never fuzzy matched.
            max_window: Upper bound on the window size in words.
        """
        self.threshold = threshold
        self.min_words = min_words
        self.min_chars = min_chars
        self.max_window = max_window

    def is_eligible(self, query: str) -> bool:
        """Check whether a query is long enough for fuzzy matching."""
        if len(query) < self.min_chars:
            return False
        return count_words(query) >= self.min_words

    def window_size(self, query: str) -> int:
        return min(count_words(query) * 2, self.max_window)

    def find(self, query: str, text: str) -> list[TextMatch]:
        matches: list[TextMatch] = []
        if not self.is_eligible(query):
            return matches

        query_words = split_words(query)
        window_size = self.window_size(query)
        words = list(WORD_PATTERN.finditer(text))

        for i in range(len(words) - window_size + 1):
            window = words[i:i + window_size]
            similarity = jaccard_similarity(query_words, (m.group(0) for m in window))
            if similarity < self.threshold:
                continue

            start = window[0].start()
            end = window[-1].end()
            matches.append(
                TextMatch(
                    start=start,
                    end=end,
                    text=text[start:end],
                    method=self.method,
                    similarity=similarity,
                )
            )

        if matches:
            logger.debug(
                f"Fuzzy matched {len(matches)} windows of {window_size} words "
                f"(threshold={self.threshold})"
            )
        return matches

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(threshold={self.threshold})"
