"""Strategies for locating quotations in document text."""

from .base import LocatorStrategy
from .exact import ExactLocator
from .fuzzy import FuzzyLocator, jaccard_similarity
from .locator import SpanLocator

__all__ = [
    "LocatorStrategy",
    "ExactLocator",
    "FuzzyLocator",
    "SpanLocator",
    "jaccard_similarity",
]
