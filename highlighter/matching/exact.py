"""Exact substring locating strategy."""

from ..models import TextMatch
from .base import LocatorStrategy


class ExactLocator(LocatorStrategy):
    """
    Reports every occurrence of the query as a substring.

    After each hit the search restarts one character past the hit's start,
    so repeated text with overlapping windows ("aaa" in "aaaa") yields
    overlapping matches. They are not deduplicated here; the materializer's
    overlap check keeps only the first one that fits.
    """

    method = "exact"

    def find(self, query: str, text: str) -> list[TextMatch]:
        matches: list[TextMatch] = []
        if not query:
            return matches

        search_start = 0
        while True:
            position = text.find(query, search_start)
            if position == -1:
                break
            matches.append(
                TextMatch(
                    start=position,
                    end=position + len(query),
                    text=query,
                    method=self.method,
                    similarity=1.0,
                )
            )
            search_start = position + 1

        return matches
