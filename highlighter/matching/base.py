"""Abstract base class for locating strategies."""

from abc import ABC, abstractmethod

from ..models import TextMatch


class LocatorStrategy(ABC):
    """
    Abstract base class for locating strategies.

    Implementations find occurrences of a normalized query inside the
    normalized text of a TextIndex.
    """

    method: str = ""

    @abstractmethod
    def find(self, query: str, text: str) -> list[TextMatch]:
        """
        Find occurrences of a query.

        Args:
            query: Normalized query text.
            text: Normalized text to search.

        Returns:
            Matches in left-to-right order (may be empty).
        """
        pass

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}()"
