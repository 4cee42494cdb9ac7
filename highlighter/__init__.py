"""Highlighter - Mark manipulation spans in HTML documents."""

__version__ = "0.1.0"

from .config import Config, get_default_config, load_config
from .controller import HighlightController
from .errors import HighlighterError, LocateFailure, MaterializeError, OverlapConflict
from .models import AnnotationSpan, MarkerRecord, TextMatch
from .registry import AnnotationRegistry, strip_markers
from .taxonomy import ManipulationType

__all__ = [
    "HighlightController",
    "AnnotationRegistry",
    "strip_markers",
    "load_config",
    "get_default_config",
    "Config",
    "AnnotationSpan",
    "MarkerRecord",
    "TextMatch",
    "ManipulationType",
    "HighlighterError",
    "LocateFailure",
    "MaterializeError",
    "OverlapConflict",
]
