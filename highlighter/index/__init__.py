"""Text indexing and coordinate mapping."""

from .builder import TextIndex, TextIndexBuilder
from .mapper import CoordinateMapper

__all__ = ["TextIndex", "TextIndexBuilder", "CoordinateMapper"]
