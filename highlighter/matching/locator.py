"""Span locator: exact search with a fuzzy fallback."""

import logging
from typing import Optional

from ..config import MatchingConfig
from ..models import TextMatch
from ..utils.text_normalizer import normalize_text
from .exact import ExactLocator
from .fuzzy import FuzzyLocator

logger = logging.getLogger(__name__)


class SpanLocator:
    """
    Finds occurrences of a quotation in normalized document text.

    Exact search runs first. The fuzzy fallback runs only when exact search
    finds nothing and the query is long enough for it.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        """
        Initialize the locator.

        Args:
            config: Matching configuration. Defaults to MatchingConfig().
        """
        self.config = config or MatchingConfig()
        self.exact = ExactLocator()
        self.fuzzy: Optional[FuzzyLocator] = None
        if self.config.fuzzy_enabled:
            self.fuzzy = FuzzyLocator(
                threshold=self.config.fuzzy_threshold,
                min_words=self.config.fuzzy_min_words,
                min_chars=self.config.fuzzy_min_chars,
                max_window=self.config.fuzzy_max_window,
            )

    def locate(self, query: str, text: str) -> list[TextMatch]:
        """
        Locate a quotation.

        Args:
            query: Quotation as reported (normalized here).
            text: Normalized text of a TextIndex.

        Returns:
            Matches from the first strategy that found any.
        """
        normalized = normalize_text(query)
        if not normalized:
            return []

        matches = self.exact.find(normalized, text)
        if matches:
            return matches

        if self.fuzzy is None or not self.fuzzy.is_eligible(normalized):
            return []

        logger.debug(f"No exact match for {normalized[:50]!r}, trying fuzzy search")
        return self.fuzzy.find(normalized, text)
