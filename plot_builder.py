"""Per-test bar charts across two or more benchmark groups."""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

from bench_errors import RendererUnavailable
from grouper import Group, collect_by_test, warn_ignored

DEFAULT_PLOT_DIR = "benchcmp"
DEFAULT_DPI = 300
MAX_FILENAME_STEM = 200

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class OutputFormat(Enum):
    EPS = "eps"
    SVG = "svg"
    PDF = "pdf"
    PNG = "png"


@dataclass
class PlotSeries:
    """One test's time per iteration in every group that ran it."""

    name: str
    points: List[Tuple[str, float, Optional[float]]] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [label for label, _, _ in self.points]

    @property
    def values(self) -> List[float]:
        return [value for _, value, _ in self.points]

    @property
    def errors(self) -> List[float]:
        return [variance or 0.0 for _, _, variance in self.points]


def build_plot_series(groups: Sequence[Group]) -> List[PlotSeries]:
    """Build a series for every test found in at least two groups."""
    series = []
    singles = {}
    for assoc in collect_by_test(groups):
        if len(assoc.entries) < 2:
            label = assoc.entries[0][0]
            singles.setdefault(label, []).append(assoc.name)
            continue
        series.append(
            PlotSeries(
                name=assoc.name,
                points=[
                    (label, record.time_per_iter, record.variance)
                    for label, record in assoc.entries
                ],
            )
        )
    for label, names in singles.items():
        warn_ignored(label, names)
    return series


def sanitize_filename(name: str) -> str:
    """Turn a benchmark name into a safe file name stem.

    Module separators become dots, anything outside ``[A-Za-z0-9._-]``
    becomes ``_`` and leading dots are removed, so the result never contains
    a path separator and never starts with ``..``.
    """
    stem = _UNSAFE_CHARS.sub("_", name.replace("::", "."))
    stem = stem.lstrip(".")[:MAX_FILENAME_STEM]
    return stem or "bench"


def artifact_paths(
    series: Sequence[PlotSeries], output_dir: Path, fmt: OutputFormat
) -> List[Path]:
    """Assign every series its own output path.

    Names that sanitize to the same stem get ``-2``, ``-3``... suffixes in
    series order.
    """
    used: Set[str] = set()
    paths = []
    for s in series:
        base = sanitize_filename(s.name)
        stem = base
        n = 1
        while stem.lower() in used:
            n += 1
            stem = f"{base}-{n}"
        used.add(stem.lower())
        paths.append(output_dir / f"{stem}.{fmt.value}")
    return paths


def _load_pyplot():
    """Import matplotlib with a non-interactive backend."""
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise RendererUnavailable(
            f"Plotting requires matplotlib and numpy: {e}"
        ) from e
    return plt, np


class PlotRenderer:
    """Render one bar chart per series with matplotlib.

    Parameters
    ----------
    output_dir : str | Path
        Directory receiving the charts. Created if missing.
    fmt : OutputFormat
        File format of every chart.
    dpi : int
        Resolution for raster output.
    """

    def __init__(
        self,
        output_dir=DEFAULT_PLOT_DIR,
        fmt: OutputFormat = OutputFormat.PNG,
        dpi: int = DEFAULT_DPI,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.fmt = fmt
        self.dpi = dpi

    def render_one(self, series: PlotSeries, path: Path) -> None:
        plt, np = _load_pyplot()

        x = np.arange(len(series.points))
        fig, ax = plt.subplots(figsize=(max(6, 1.5 * len(series.points) + 2), 6))
        try:
            bars = ax.bar(
                x,
                series.values,
                0.9,
                yerr=series.errors,
                capsize=4,
                alpha=0.8,
                color=[f"C{i}" for i in range(len(series.points))],
            )
            for bar, label in zip(bars, series.labels):
                bar.set_label(label or "(root)")

            top = max(v + e for v, e in zip(series.values, series.errors))
            ax.set_ylim(0, top * 1.02 if top > 0 else 1)
            ax.set_title(series.name)
            ax.set_ylabel("ns/iter")
            ax.set_xticks([])
            ax.legend()
            ax.grid(True, axis="y", alpha=0.3)

            fig.tight_layout()
            fig.savefig(path, format=self.fmt.value, dpi=self.dpi, bbox_inches="tight")
        except (OSError, ValueError, RuntimeError) as e:
            raise RendererUnavailable(f"Failed to render '{path}': {e}") from e
        finally:
            plt.close(fig)

    def render(self, series: Sequence[PlotSeries]) -> List[Path]:
        """Render every series and return the written paths."""
        _load_pyplot()
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RendererUnavailable(
                f"Cannot create plot directory '{self.output_dir}': {e}"
            ) from e

        logging.info(f"Writing {len(series)} plots to {self.output_dir}")
        paths = artifact_paths(series, self.output_dir, self.fmt)
        for s, path in zip(series, paths):
            self.render_one(s, path)
            logging.debug(f"Chart for '{s.name}' saved to: {path}")
        return paths
