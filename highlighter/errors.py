"""Exception taxonomy for the annotation pipeline.

None of these escape ``HighlightController.apply_annotations``; the registry
catches them per occurrence and degrades to annotating what it can.
"""


class HighlighterError(Exception):
    """Base class for annotation pipeline errors."""


class LocateFailure(HighlighterError):
    """Neither exact nor fuzzy search found the span's text."""


class OverlapConflict(HighlighterError):
    """A located occurrence intersects an already materialized marker."""


class MaterializeError(HighlighterError):
    """Both the primary wrap and the extract fallback were impossible."""
