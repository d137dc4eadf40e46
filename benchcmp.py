#!/usr/bin/env python3
"""Command-line interface to compare micro-benchmark results."""

import argparse
import sys
from typing import List, Optional

from bench_errors import BenchCmpError
from bench_record import read_sources
from comparison_filter import ComparisonFilter
from delta_engine import compare_all
from grouper import (
    CompareBy,
    group_by_file,
    group_by_module,
    group_by_module_all,
    pair_groups,
)
from logger import Logger
from name_matcher import NameMatcher
from plot_builder import (
    DEFAULT_DPI,
    DEFAULT_PLOT_DIR,
    OutputFormat,
    PlotRenderer,
    build_plot_series,
)
from settings import PlotSettings, TableSettings, settings_from_args
from table_renderer import TableRenderer, write_table


# ---------- CLI --------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the ``table`` and ``plot`` commands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--no-color",
        action="store_true",
        help="Suppress coloring of improvements/regressions.",
    )
    common.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    common.add_argument(
        "--log-file",
        default=None,
        metavar="PATH",
        help="Also write log messages to this file.",
    )
    common.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Benchmark output files, or '-' to read standard input.",
    )

    parser = argparse.ArgumentParser(
        description="Compares micro-benchmark results.", allow_abbrev=False
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    table = subparsers.add_parser(
        "table",
        parents=[common],
        allow_abbrev=False,
        help="Output a table that compares two groups of benchmark results.",
        description=(
            "Compare two files, or with --by-module two modules: "
            "table [options] --by-module NAME NAME FILE..."
        ),
    )
    table.add_argument(
        "--by-module",
        action="store_true",
        help="Take two module names before the files and compare those.",
    )
    table.add_argument(
        "--output", default=None, metavar="FILE", help="Write to file instead of stdout."
    )
    table.add_argument("--variance", action="store_true", help="Show variance.")
    table.add_argument(
        "--threshold",
        type=float,
        default=None,
        metavar="N",
        help="Only show comparisons with an absolute percentage change of at least N.",
    )
    table.add_argument(
        "--regressions", action="store_true", help="Show only regressions."
    )
    table.add_argument(
        "--improvements", action="store_true", help="Show only improvements."
    )
    table.add_argument(
        "--strip-fst",
        default=None,
        metavar="RE",
        help="A regex to strip from the first benchmarks' names.",
    )
    table.add_argument(
        "--strip-snd",
        default=None,
        metavar="RE",
        help="A regex to strip from the second benchmarks' names.",
    )

    plot = subparsers.add_parser(
        "plot",
        parents=[common],
        allow_abbrev=False,
        help="Plot a bar chart for every benchmark found in two or more groups.",
    )
    plot.add_argument(
        "--by",
        choices=[c.value for c in CompareBy],
        default=CompareBy.MODULE.value,
        help="Plot benchmarks by file or module (default: module).",
    )
    plot.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.PNG.value,
        help="Output format (default: png).",
    )
    plot.add_argument(
        "--dir",
        default=DEFAULT_PLOT_DIR,
        metavar="DIR",
        help=f"Directory for the charts (default: {DEFAULT_PLOT_DIR}).",
    )
    plot.add_argument(
        "--dpi",
        type=int,
        default=DEFAULT_DPI,
        help=f"Resolution of raster charts (default: {DEFAULT_DPI}).",
    )
    parser.command_parsers = {"table": table, "plot": plot}
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Options may be interleaved with the files, so the command
    is dispatched by hand to its own parser for intermixed parsing.
    """
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    if argv and argv[0] in parser.command_parsers:
        args = parser.command_parsers[argv[0]].parse_intermixed_args(argv[1:])
        args.command = argv[0]
        return args
    return parser.parse_args(argv)


# ---------- Commands ---------------------------------------------------------
def run_table(files: List[str], settings: TableSettings) -> None:
    """Compare two groups and write the table."""
    matcher = NameMatcher(settings.strip_fst, settings.strip_snd)
    comparison_filter = ComparisonFilter(settings.threshold, settings.show)

    sources = read_sources(files)
    if settings.compare_by == CompareBy.MODULE:
        first, second = group_by_module(sources, settings.modules)
    else:
        first, second = group_by_file(sources, table_mode=True)

    pairs = pair_groups(first, second, matcher)
    comparisons = compare_all(pairs, settings.variance)
    shown = comparison_filter.apply(comparisons)
    Logger.info(
        f"{len(pairs)} matched test(s), showing {len(shown)} "
        f"({settings.show.value}, threshold={settings.threshold})"
    )

    renderer = TableRenderer(
        first.label,
        second.label,
        show_variance=settings.variance,
        color=settings.color and settings.out_file is None,
    )
    write_table(renderer, shown, settings.out_file)


def run_plot(files: List[str], settings: PlotSettings) -> None:
    """Plot every test shared by two or more groups."""
    sources = read_sources(files)
    if settings.compare_by == CompareBy.MODULE:
        groups = group_by_module_all(sources)
    else:
        groups = group_by_file(sources, table_mode=False)

    series = build_plot_series(groups)
    if not series:
        Logger.warning("No benchmark was found in two or more groups, nothing to plot")

    renderer = PlotRenderer(settings.output_dir, settings.format, settings.dpi)
    generated = renderer.render(series)
    Logger.info(f"Generated {len(generated)} chart(s) in {settings.output_dir}")


# ---------- Entry point ------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the benchcmp CLI."""
    args = parse_args(argv)
    try:
        Logger.init_logging(args.log_level, args.log_file)
    except OSError as e:
        Logger.error(f"Cannot open log file '{args.log_file}': {e}")

    try:
        settings = settings_from_args(args)
        Logger.debug(f"Settings: {settings}")
        if isinstance(settings.mode, TableSettings):
            run_table(settings.files, settings.mode)
        else:
            run_plot(settings.files, settings.mode)
    except BenchCmpError as e:
        Logger.error(str(e))


if __name__ == "__main__":
    main()
