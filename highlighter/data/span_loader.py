"""Loader for classifier span files."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from ..models import AnnotationSpan

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["original_text", "manipulation_type"]


class SpanLoader:
    """
    Loads AnnotationSpan lists from classifier output.

    Supports:
    - JSON: a list of span records, or an analysis envelope
      ``{"manipulations": [...]}``
    - CSV: one span per row with the classifier field names as columns
    """

    def __init__(self, path: Union[str, Path], format: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            path: Span file path.
            format: "json" or "csv". Inferred from the suffix when None.
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Span file not found: {self.path}")

        self.format = format or self.path.suffix.lstrip(".").lower()
        if self.format not in ("json", "csv"):
            raise ValueError(f"Unsupported span file format: {self.format!r}")

    def load(self) -> List[AnnotationSpan]:
        """
        Read and validate every span in the file.

        Returns:
            Spans in file order.

        Raises:
            ValueError: If a record has an unknown type, an out-of-range
                confidence, or the file has the wrong shape.
        """
        if self.format == "json":
            records = self._read_json()
        else:
            records = self._read_csv()

        spans = []
        for i, record in enumerate(records):
            try:
                spans.append(AnnotationSpan.from_dict(record))
            except ValueError as e:
                raise ValueError(f"Invalid span {i} in {self.path}: {e}") from e

        logger.info(f"Loaded {len(spans)} spans from {self.path}")
        return spans

    def _read_json(self) -> List[dict]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("manipulations")
        if not isinstance(data, list):
            raise ValueError(
                f"Expected a list of spans or a 'manipulations' list in {self.path}"
            )
        return data

    def _read_csv(self) -> List[dict]:
        df = pd.read_csv(self.path, keep_default_na=False)
        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise ValueError(f"Missing columns in {self.path}: {', '.join(missing)}")
        return df.to_dict(orient="records")


def load_spans(path: Union[str, Path], format: Optional[str] = None) -> List[AnnotationSpan]:
    """Convenience wrapper around SpanLoader."""
    return SpanLoader(path, format).load()
