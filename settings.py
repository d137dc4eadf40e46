"""Typed settings built from the parsed command line."""

import argparse
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from bench_errors import ConfigurationError
from bench_record import STDIN_MARKER
from comparison_filter import Show
from grouper import CompareBy
from plot_builder import DEFAULT_DPI, DEFAULT_PLOT_DIR, OutputFormat


@dataclass(frozen=True)
class TableSettings:
    compare_by: CompareBy
    modules: Optional[Tuple[str, str]] = None
    out_file: Optional[str] = None
    variance: bool = False
    threshold: Optional[float] = None
    show: Show = Show.BOTH
    strip_fst: Optional[str] = None
    strip_snd: Optional[str] = None
    color: bool = True


@dataclass(frozen=True)
class PlotSettings:
    compare_by: CompareBy = CompareBy.MODULE
    format: OutputFormat = OutputFormat.PNG
    output_dir: str = DEFAULT_PLOT_DIR
    dpi: int = DEFAULT_DPI


@dataclass(frozen=True)
class Settings:
    files: List[str]
    mode: Union[TableSettings, PlotSettings]


def validate_files(files: List[str]) -> None:
    """Require at least one input; ``-`` may only appear on its own."""
    if not files:
        raise ConfigurationError("Missing argument: <file>")
    if STDIN_MARKER in files and len(files) > 1:
        raise ConfigurationError(
            "'-' reads standard input and cannot be combined with other files"
        )


def table_settings_from_args(args: argparse.Namespace) -> Tuple[List[str], TableSettings]:
    files = list(args.files)
    modules = None
    if args.by_module:
        # The two module names come first among the positional arguments.
        if len(files) < 2:
            raise ConfigurationError("--by-module requires two module names")
        modules = (files[0], files[1])
        files = files[2:]

    settings = TableSettings(
        compare_by=CompareBy.MODULE if args.by_module else CompareBy.FILE,
        modules=modules,
        out_file=args.output,
        variance=args.variance,
        threshold=args.threshold,
        show=Show.from_flags(args.regressions, args.improvements),
        strip_fst=args.strip_fst,
        strip_snd=args.strip_snd,
        color=not args.no_color,
    )
    return files, settings


def plot_settings_from_args(args: argparse.Namespace) -> Tuple[List[str], PlotSettings]:
    if args.dpi <= 0:
        raise ConfigurationError(f"--dpi must be a positive integer, got {args.dpi}")
    try:
        fmt = OutputFormat(args.format)
    except ValueError as e:
        raise ConfigurationError(f"Unknown --format '{args.format}'") from e

    settings = PlotSettings(
        compare_by=CompareBy(args.by),
        format=fmt,
        output_dir=args.dir,
        dpi=args.dpi,
    )
    return list(args.files), settings


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Validate ``args`` and convert them into ``Settings``."""
    if args.command == "table":
        files, mode = table_settings_from_args(args)
    else:
        files, mode = plot_settings_from_args(args)
    validate_files(files)
    return Settings(files=files, mode=mode)
