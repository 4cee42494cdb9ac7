"""Span input and marker report output."""

from .report_writer import ReportWriter
from .span_loader import SpanLoader, load_spans

__all__ = ["SpanLoader", "ReportWriter", "load_spans"]
