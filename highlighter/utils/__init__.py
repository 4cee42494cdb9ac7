"""Utility functions."""

from .text_normalizer import (
    count_words,
    denormalize_offset,
    normalize_text,
    split_words,
    truncate_text,
)

__all__ = [
    "count_words",
    "denormalize_offset",
    "normalize_text",
    "split_words",
    "truncate_text",
]
