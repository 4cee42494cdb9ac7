"""Tests for span loading and report writing."""

import json

import pandas as pd
import pytest
from bs4 import BeautifulSoup

from highlighter.data import ReportWriter, SpanLoader, load_spans
from highlighter.models import AnnotationSpan
from highlighter.registry import AnnotationRegistry
from highlighter.taxonomy import ManipulationType

RECORDS = [
    {
        "original_text": "you should be very afraid",
        "manipulation_type": "fear_mongering",
        "manipulation_description": "Creates a sense of danger",
        "confidence": 0.9,
    },
    {
        "original_text": "what comes next",
        "manipulation_type": "buried_lede",
        "manipulation_description": "",
        "confidence": 0.4,
    },
]


def make_records():
    soup = BeautifulSoup(
        "<html><body><p>The sky is falling and you should be very afraid "
        "of what comes next.</p></body></html>",
        "lxml",
    )
    spans = [AnnotationSpan.from_dict(r) for r in RECORDS]
    return AnnotationRegistry().apply(soup.body, spans)


class TestSpanLoader:
    """Tests for SpanLoader."""

    def test_json_list(self, tmp_path):
        """Test loading a plain JSON list of spans."""
        path = tmp_path / "spans.json"
        path.write_text(json.dumps(RECORDS))
        spans = SpanLoader(path).load()

        assert len(spans) == 2
        assert spans[0].manipulation_type == ManipulationType.FEAR_MONGERING
        assert spans[0].confidence == 0.9
        assert spans[1].category == "Structural Manipulation"

    def test_json_envelope(self, tmp_path):
        """Test loading spans from an analysis envelope."""
        path = tmp_path / "analysis.json"
        path.write_text(json.dumps({"manipulations": RECORDS, "totalCount": 2}))
        assert len(load_spans(path)) == 2

    def test_exported_spans_load_back(self, tmp_path):
        """Test spans written with to_dict load back."""
        spans = [AnnotationSpan.from_dict(r) for r in RECORDS]
        path = tmp_path / "spans.json"
        path.write_text(json.dumps([s.to_dict() for s in spans]))

        assert SpanLoader(path).load() == spans

    def test_csv(self, tmp_path):
        """Test loading spans from CSV."""
        path = tmp_path / "spans.csv"
        pd.DataFrame(RECORDS).to_csv(path, index=False)
        spans = SpanLoader(path).load()

        assert [s.original_text for s in spans] == [r["original_text"] for r in RECORDS]
        assert spans[1].manipulation_description == ""
        assert spans[1].confidence == 0.4

    def test_unknown_type(self, tmp_path):
        """Test an unknown manipulation type is rejected."""
        path = tmp_path / "spans.json"
        path.write_text(json.dumps([dict(RECORDS[0], manipulation_type="propaganda")]))
        with pytest.raises(ValueError, match="propaganda"):
            SpanLoader(path).load()

    def test_confidence_out_of_range(self, tmp_path):
        """Test confidence outside [0, 1] is rejected."""
        path = tmp_path / "spans.json"
        path.write_text(json.dumps([dict(RECORDS[0], confidence=1.5)]))
        with pytest.raises(ValueError):
            SpanLoader(path).load()

    def test_wrong_shape(self, tmp_path):
        """Test JSON that is not a list or envelope is rejected."""
        path = tmp_path / "spans.json"
        path.write_text(json.dumps({"spans": RECORDS}))
        with pytest.raises(ValueError):
            SpanLoader(path).load()

    def test_csv_missing_columns(self, tmp_path):
        """Test CSV without the required columns is rejected."""
        path = tmp_path / "spans.csv"
        pd.DataFrame([{"text": "x"}]).to_csv(path, index=False)
        with pytest.raises(ValueError, match="original_text"):
            SpanLoader(path).load()

    def test_missing_file(self, tmp_path):
        """Test loading a missing span file raises."""
        with pytest.raises(FileNotFoundError):
            SpanLoader(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        """Test unsupported span file extensions are rejected."""
        path = tmp_path / "spans.txt"
        path.write_text("")
        with pytest.raises(ValueError):
            SpanLoader(path)


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_csv(self, tmp_path):
        """Test writing a CSV marker report."""
        records = make_records()
        path = tmp_path / "reports" / "markers.csv"
        with ReportWriter(path) as writer:
            writer.write_records(records)
            assert writer.count == 2

        df = pd.read_csv(path)
        assert len(df) == 2
        assert list(df["manipulation_type"]) == ["fear_mongering", "buried_lede"]
        assert list(df["marker_text"]) == ["you should be very afraid", "what comes next"]
        assert set(df["materialize_method"]) == {"wrap"}

    def test_json_without_text(self, tmp_path):
        """Test the JSON report can omit marker text."""
        records = make_records()
        path = tmp_path / "markers.json"
        with ReportWriter(path, format="json", include_text=False) as writer:
            writer.write_records(records)

        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
        assert len(rows) == 2
        assert rows[0]["category"] == "Emotional Manipulation"
        assert "original_text" not in rows[0]

    def test_empty_csv_has_header(self, tmp_path):
        """Test an empty CSV report still has a header row."""
        path = tmp_path / "markers.csv"
        with ReportWriter(path):
            pass

        df = pd.read_csv(path)
        assert len(df) == 0
        assert "marker_id" in df.columns


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
