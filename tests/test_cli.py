"""End-to-end tests for the command-line interface."""

import json

import pandas as pd
import pytest
from bs4 import BeautifulSoup

from highlighter.cli import main
from highlighter.constants import MARKER_BASE_CLASS
from highlighter.utils import normalize_text

DOCUMENT = (
    "<html><head><title>News</title></head><body>"
    "<p>The sky is falling and <em>you should</em> be very afraid of what comes next.</p>"
    "</body></html>"
)

SPANS = [
    {
        "original_text": "you should be very afraid",
        "manipulation_type": "fear_mongering",
        "manipulation_description": "Creates a sense of danger",
        "confidence": 0.9,
    },
]


def write_inputs(tmp_path):
    html_path = tmp_path / "article.html"
    html_path.write_text(DOCUMENT, encoding="utf-8")
    spans_path = tmp_path / "spans.json"
    spans_path.write_text(json.dumps(SPANS), encoding="utf-8")
    return html_path, spans_path


def body_of(path):
    return str(BeautifulSoup(path.read_text(encoding="utf-8"), "lxml").body)


class TestAnnotate:
    """Tests for annotating a document."""

    def test_end_to_end(self, tmp_path, capsys):
        """Test annotating a document writes markers, report and summary."""
        html_path, spans_path = write_inputs(tmp_path)
        output_path = tmp_path / "out" / "article.html"
        report_path = tmp_path / "out" / "markers.csv"

        exit_code = main([
            "--input", str(html_path),
            "--spans", str(spans_path),
            "--output", str(output_path),
            "--report", str(report_path),
        ])

        assert exit_code == 0
        soup = BeautifulSoup(output_path.read_text(encoding="utf-8"), "lxml")
        markers = soup.find_all(attrs={"data-manipulation-type": "fear_mongering"})
        assert len(markers) == 1
        assert markers[0].get_text() == "you should be very afraid"
        assert soup.find(id="manipulation-detector-styles") is not None

        report = pd.read_csv(report_path)
        assert list(report["materialize_method"]) == ["extract"]

        out = capsys.readouterr().out
        assert "Highlighted 1 occurrences of 1 spans" in out
        assert "Emotional Manipulation: 1" in out

    def test_config_file_and_overrides(self, tmp_path):
        """Test command-line options override the config file."""
        html_path, spans_path = write_inputs(tmp_path)
        output_path = tmp_path / "article_annotated.html"
        config_path = tmp_path / "highlighter.yaml"
        config_path.write_text(
            f"input_path: {html_path}\n"
            f"spans_path: {spans_path}\n"
            f"output_path: {output_path}\n"
            "highlight:\n  mode: full-color\n"
        )

        assert main(["--config", str(config_path), "--mode", "low-contrast"]) == 0
        soup = BeautifulSoup(output_path.read_text(encoding="utf-8"), "lxml")
        marker = soup.find(attrs={"data-manipulation-type": "fear_mongering"})
        assert "low-contrast" in marker["class"]

    def test_json_report(self, tmp_path):
        """Test the report can be written as JSON."""
        html_path, spans_path = write_inputs(tmp_path)
        report_path = tmp_path / "markers.json"

        assert main([
            "--input", str(html_path),
            "--spans", str(spans_path),
            "--output", str(tmp_path / "out.html"),
            "--report", str(report_path),
            "--report-format", "json",
        ]) == 0
        rows = json.loads(report_path.read_text(encoding="utf-8"))
        assert rows[0]["manipulation_type"] == "fear_mongering"


class TestClear:
    """Tests for stripping a previous run's annotations."""

    def test_clear_restores_document(self, tmp_path):
        """Test --clear strips markers from an annotated document."""
        html_path, spans_path = write_inputs(tmp_path)
        annotated = tmp_path / "annotated.html"
        cleared = tmp_path / "cleared.html"

        main(["--input", str(html_path), "--spans", str(spans_path), "--output", str(annotated)])
        assert main(["--input", str(annotated), "--output", str(cleared), "--clear"]) == 0

        assert body_of(cleared) == body_of(html_path)

    def test_clear_keeps_text_of_loosely_formatted_document(self, tmp_path):
        """Test --clear restores the text of a document with body-level whitespace."""
        html_path, spans_path = write_inputs(tmp_path)
        html_path.write_text(
            "<html><body>\n  <p>The sky is falling and <em>you should</em> be very afraid.</p>\n"
            "  \n eps you should be very afraid\n  </body></html>",
            encoding="utf-8",
        )
        annotated = tmp_path / "annotated.html"
        cleared = tmp_path / "cleared.html"

        main(["--input", str(html_path), "--spans", str(spans_path), "--output", str(annotated)])
        assert main(["--input", str(annotated), "--output", str(cleared), "--clear"]) == 0

        original = BeautifulSoup(html_path.read_text(encoding="utf-8"), "lxml")
        restored = BeautifulSoup(cleared.read_text(encoding="utf-8"), "lxml")
        assert restored.find(class_=MARKER_BASE_CLASS) is None
        assert normalize_text(restored.body.get_text()) == normalize_text(original.body.get_text())


class TestErrors:
    """Tests for error exits."""

    def test_missing_input_file(self, tmp_path, capsys):
        """Test a missing input document exits with an error."""
        _, spans_path = write_inputs(tmp_path)
        exit_code = main([
            "--input", str(tmp_path / "missing.html"),
            "--spans", str(spans_path),
            "--output", str(tmp_path / "out.html"),
        ])
        assert exit_code == 1
        assert "not found" in capsys.readouterr().err

    def test_spans_required(self, tmp_path):
        """Test annotating without spans exits with an error."""
        html_path, _ = write_inputs(tmp_path)
        assert main(["--input", str(html_path), "--output", str(tmp_path / "out.html")]) == 1

    def test_invalid_threshold(self, tmp_path):
        """Test an out-of-range threshold is rejected."""
        html_path, spans_path = write_inputs(tmp_path)
        assert main([
            "--input", str(html_path),
            "--spans", str(spans_path),
            "--output", str(tmp_path / "out.html"),
            "--threshold", "2",
        ]) == 1

    def test_invalid_span_type(self, tmp_path):
        """Test a span file with an unknown type exits with an error."""
        html_path, spans_path = write_inputs(tmp_path)
        spans_path.write_text(json.dumps([dict(SPANS[0], manipulation_type="propaganda")]))
        assert main([
            "--input", str(html_path),
            "--spans", str(spans_path),
            "--output", str(tmp_path / "out.html"),
        ]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
