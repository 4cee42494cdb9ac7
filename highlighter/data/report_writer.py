"""Report writer for created markers."""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Literal, Union

import pandas as pd

from ..models import MarkerRecord

logger = logging.getLogger(__name__)


class ReportWriter:
    """
    Writes marker records to CSV or JSON.

    Can be used as a context manager; buffered rows are written on exit.
    """

    def __init__(
        self,
        output_path: Union[str, Path],
        format: Literal["csv", "json"] = "csv",
        include_text: bool = True,
    ):
        """
        Initialize the report writer.

        Args:
            output_path: Path to write the report to.
            format: Output format (csv or json).
            include_text: Whether to include span and marker text.
        """
        self.output_path = Path(output_path)
        self.format = format
        self.include_text = include_text
        self._buffer: List[dict] = []
        self._total_written = 0

        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def write_record(self, record: MarkerRecord) -> None:
        self._buffer.append(record.to_dict(include_text=self.include_text))

    def write_records(self, records: Iterable[MarkerRecord]) -> None:
        for record in records:
            self.write_record(record)

    def flush(self) -> None:
        """Write buffered rows to the report file."""
        if self.format == "csv":
            # Header only when nothing was annotated
            df = pd.DataFrame(self._buffer, columns=self._columns() if not self._buffer else None)
            df.to_csv(self.output_path, index=False)
        elif self.format == "json":
            with open(self.output_path, "w", encoding="utf-8") as f:
                json.dump(self._buffer, f, ensure_ascii=False, indent=2)
        else:
            raise ValueError(f"Unsupported report format: {self.format!r}")

        self._total_written = len(self._buffer)
        logger.info(f"Wrote {self._total_written} markers to {self.output_path}")

    def _columns(self) -> List[str]:
        columns = [
            "marker_id", "span_index", "manipulation_type", "category", "confidence",
            "match_method", "similarity", "materialize_method", "start", "end",
        ]
        if self.include_text:
            columns += ["original_text", "marker_text", "manipulation_description"]
        return columns

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - flush unless the block raised."""
        if exc_type is None:
            self.flush()

    @property
    def count(self) -> int:
        return len(self._buffer)
