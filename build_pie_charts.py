# build_pie_charts.py
# Command line front end: read a chart description, write the SVG.
#   python build_pie_charts.py samples/fruit.toml fruit.svg
#   python build_pie_charts.py sales.csv sales.svg --label-col Region --value-col Total
# Without an output path the SVG goes to stdout; "-" as input reads stdin.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chart_input import apply_overrides, load_table, parse_chart
from pie_errors import ParseError, PieChartError, WriteError
from pie_svg import render_svg

logger = logging.getLogger("pie-chart")

TABLE_SUFFIXES = (".csv", ".xlsx")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    # UnknownOptionWarning and friends end up in the log instead of raw stderr
    logging.captureWarnings(True)


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_svg(path: Optional[str], svg: str) -> None:
    if not path or path == "-":
        sys.stdout.write(svg)
        sys.stdout.write("\n")
        return
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(svg)
    except OSError as exc:
        raise WriteError(f"Unable to write '{path}': {exc.strerror or exc}") from exc


def build_chart_svg(args: argparse.Namespace) -> str:
    """Run the pipeline for the parsed command line; nothing is written here."""
    overrides = {
        "unit": args.unit,
        "legend_position": args.legend_position,
        "radius": args.radius,
    }
    if args.label_col or args.value_col or Path(args.input).suffix.lower() in TABLE_SUFFIXES:
        if not (args.label_col and args.value_col):
            raise PieChartError("tabular input needs --label-col and --value-col")
        try:
            chart = load_table(args.input, args.label_col, args.value_col, color_col=args.color_col)
        except OSError as exc:
            raise PieChartError(f"Unable to open file '{args.input}': {exc.strerror or exc}") from exc
    else:
        try:
            text = read_input(args.input)
        except OSError as exc:
            raise PieChartError(f"Unable to open file '{args.input}': {exc.strerror or exc}") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(f"'{args.input}' is not UTF-8 text (byte {exc.start})") from exc
        chart = parse_chart(text)

    # command line settings win over the ones in the file
    chart = apply_overrides(chart, title=args.title, **overrides)
    return render_svg(chart, show_labels=not args.no_labels)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a pie chart with a legend as SVG")
    parser.add_argument("input", help="chart description (.toml), a .csv/.xlsx table, or - for stdin")
    parser.add_argument("output", nargs="?", help="SVG file to write (default: stdout)")
    parser.add_argument("--no-labels", action="store_true", help="leave out the percentage labels")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    table = parser.add_argument_group("tabular input")
    table.add_argument("--label-col", help="column holding the slice labels")
    table.add_argument("--value-col", help="column holding the slice values")
    table.add_argument("--color-col", help="optional column holding slice colors")

    chart = parser.add_argument_group("chart settings (override the input file)")
    chart.add_argument("--title", help="chart heading")
    chart.add_argument("--unit", help="suffix appended to legend values")
    chart.add_argument("--radius", type=float, help="chart radius in px")
    chart.add_argument("--legend-position", choices=("right", "bottom"))
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    try:
        svg = build_chart_svg(args)
        write_svg(args.output, svg)
    except PieChartError as exc:
        logger.debug("build failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.output and args.output != "-":
        logger.info("[OK] %s -> %s", args.input, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
