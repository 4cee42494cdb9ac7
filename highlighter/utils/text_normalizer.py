"""Text normalization utilities."""

import re

WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    Collapse every whitespace run to a single space and trim the ends.

    The result is the canonical form used for matching. The function is
    idempotent: ``normalize_text(normalize_text(s)) == normalize_text(s)``.

    Args:
        text: Input text

    Returns:
        Normalized text
    """
    if not text:
        return ""
    return WHITESPACE_RUN.sub(" ", text).strip()


def split_words(text: str) -> list[str]:
    """Split normalized text into words."""
    normalized = normalize_text(text)
    if not normalized:
        return []
    return normalized.split(" ")


def count_words(text: str) -> int:
    """Count whitespace separated words."""
    return len(split_words(text))


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to at most ``max_length`` characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def denormalize_offset(raw_text: str, normalized_offset: int) -> int:
    """
    Map an offset in ``normalize_text(raw_text)`` back to ``raw_text``.

    Leading whitespace dropped by the trim is skipped first. After that every
    non-whitespace character counts as one normalized unit and every
    whitespace run counts as one unit (the single space it collapses to).

    Args:
        raw_text: Original text
        normalized_offset: Offset in the normalized form

    Returns:
        Offset of the corresponding character in ``raw_text``, clamped to
        ``len(raw_text)``
    """
    length = len(raw_text)
    pos = 0
    while pos < length and raw_text[pos].isspace():
        pos += 1

    count = 0
    while pos < length and count < normalized_offset:
        if raw_text[pos].isspace():
            while pos < length and raw_text[pos].isspace():
                pos += 1
        else:
            pos += 1
        count += 1

    return min(pos, length)
