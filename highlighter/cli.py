"""Command-line interface for annotating saved HTML documents."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from .config import Config, load_config
from .controller import HighlightController
from .data import ReportWriter, SpanLoader
from .registry import strip_markers


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Highlight manipulation spans in an HTML document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using config file
  highlighter-annotate --config highlighter.yaml

  # Using command-line arguments
  highlighter-annotate \\
      --input article.html \\
      --spans analysis.json \\
      --output article_annotated.html \\
      --report markers.csv

  # Remove annotations written by a previous run
  highlighter-annotate --input article_annotated.html --output article.html --clear
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )

    # Input/Output
    parser.add_argument(
        "--input",
        type=Path,
        help="HTML document to annotate",
    )
    parser.add_argument(
        "--spans",
        type=Path,
        help="Classifier spans (JSON list, analysis JSON, or CSV)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Where to write the annotated HTML",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Optional marker report path",
    )
    parser.add_argument(
        "--report-format",
        choices=["csv", "json"],
        help="Report format (default: csv)",
    )

    # Annotation options
    parser.add_argument(
        "--mode",
        choices=["full-color", "low-contrast"],
        help="Presentation mode (default: full-color)",
    )
    parser.add_argument(
        "--selector",
        help="CSS selector of the region to annotate (default: body)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Fuzzy match similarity threshold (default: 0.7)",
    )
    parser.add_argument(
        "--no-fuzzy",
        action="store_true",
        help="Disable the fuzzy fallback",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help=(
            "Strip existing annotations instead of adding new ones. Text is "
            "restored; whitespace between block elements may be reformatted "
            "by the HTML parser"
        ),
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> Config:
    """Build configuration from a config file and/or command-line overrides."""
    config = load_config(args.config) if args.config else Config()

    if args.input:
        config.input_path = args.input
    if args.spans:
        config.spans_path = args.spans
    if args.output:
        config.output_path = args.output
    if args.report:
        config.report_path = args.report
    if args.report_format:
        config.output.format = args.report_format
    if args.mode:
        config.highlight.mode = args.mode
    if args.selector:
        config.region_selector = args.selector
    if args.threshold is not None:
        if not 0.0 <= args.threshold <= 1.0:
            raise ValueError(f"--threshold must be in [0, 1], got {args.threshold}")
        config.matching.fuzzy_threshold = args.threshold
    if args.no_fuzzy:
        config.matching.fuzzy_enabled = False

    if config.input_path is None:
        raise ValueError("--input is required when not set in --config")
    if config.output_path is None:
        raise ValueError("--output is required when not set in --config")
    if config.spans_path is None and not args.clear:
        raise ValueError("--spans is required when not set in --config")

    return config


def read_document(path: Path) -> BeautifulSoup:
    if not path.exists():
        raise FileNotFoundError(f"Input document not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return BeautifulSoup(f.read(), "lxml")


def write_document(soup: BeautifulSoup, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(str(soup))


def run_clear(config: Config) -> int:
    soup = read_document(config.input_path)
    root = soup.select_one(config.region_selector) or soup
    removed = strip_markers(root)
    write_document(soup, config.output_path)

    print(f"\nRemoved {removed} markers")
    print(f"Document saved to: {config.output_path}")
    return 0


def run_annotate(config: Config) -> int:
    spans = SpanLoader(config.spans_path).load()
    soup = read_document(config.input_path)

    controller = HighlightController(soup, config)
    count = controller.apply_annotations(spans, config.highlight.mode)
    write_document(soup, config.output_path)

    if config.report_path:
        with ReportWriter(
            config.report_path,
            format=config.output.format,
            include_text=config.output.include_text,
        ) as writer:
            writer.write_records(controller.registry.markers)

    summary = controller.summary()
    print(f"\nHighlighted {count} occurrences of {summary['total_spans']} spans")
    for category, category_count in summary["by_category"].items():
        if category_count:
            print(f"  {category}: {category_count}")
    print(f"Document saved to: {config.output_path}")
    if config.report_path:
        print(f"Report saved to: {config.report_path}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = config_from_args(args)
        if args.clear:
            return run_clear(config)
        return run_annotate(config)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Annotation failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
