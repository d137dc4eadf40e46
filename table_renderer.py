"""Column-aligned text rendering of benchmark comparisons."""

import logging
import sys
from typing import List, Optional, Sequence, TextIO, Tuple

from rich.console import Console
from rich.text import Text

from bench_errors import OutputUnwritable
from delta_engine import Classification, Comparison

UNDEFINED_MARKER = "undefined"
MISSING_VARIANCE = "-"
COLUMN_GAP = "  "

CLASSIFICATION_STYLES = {
    Classification.REGRESSION: "red",
    Classification.IMPROVEMENT: "green",
    Classification.NEUTRAL: None,
}


def format_number(value: float) -> str:
    """Format with thousands separators, dropping decimals for whole values."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_percentage(comparison: Comparison) -> str:
    if not comparison.pct_defined:
        return UNDEFINED_MARKER
    return f"{comparison.pct_change:.2f}%"


def format_value(time_per_iter: float, throughput: Optional[float]) -> str:
    cell = format_number(time_per_iter)
    if throughput is not None:
        cell += f" ({format_number(throughput)} MB/s)"
    return cell


def format_variance(variance: Optional[float]) -> str:
    return MISSING_VARIANCE if variance is None else format_number(variance)


class TableRenderer:
    """Lay out comparisons in globally aligned columns.

    Parameters
    ----------
    first_label : str
        Label of the baseline group, used in the column headers.
    second_label : str
        Label of the compared group.
    show_variance : bool
        Add a ``+/-`` column per group.
    color : bool
        Highlight regressions and improvements. No escape codes are written
        when disabled.
    """

    def __init__(
        self,
        first_label: str,
        second_label: str,
        show_variance: bool = False,
        color: bool = True,
    ) -> None:
        self.first_label = first_label
        self.second_label = second_label
        self.show_variance = show_variance
        self.color = color

    def header(self) -> List[str]:
        cells = [
            "name",
            f"{self.first_label} ns/iter",
            f"{self.second_label} ns/iter",
        ]
        if self.show_variance:
            cells += [f"{self.first_label} +/-", f"{self.second_label} +/-"]
        return cells + ["diff ns/iter", "diff %"]

    def row(self, comparison: Comparison) -> List[str]:
        cells = [
            comparison.name,
            format_value(comparison.first.time_per_iter, comparison.first.throughput),
            format_value(comparison.second.time_per_iter, comparison.second.throughput),
        ]
        if self.show_variance:
            first_var, second_var = comparison.variance_shown or (
                comparison.first.variance,
                comparison.second.variance,
            )
            cells += [format_variance(first_var), format_variance(second_var)]
        return cells + [format_number(comparison.abs_delta), format_percentage(comparison)]

    @staticmethod
    def column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
        """Widest cell per column across every row."""
        return [max(len(cell) for cell in column) for column in zip(*rows)]

    def lines(self, comparisons: Sequence[Comparison]) -> List[Tuple[List[str], Optional[Classification]]]:
        """Return padded cells per line, header first.

        The header has no classification. Widths are computed over all lines
        before any cell is padded.
        """
        rows = [self.header()] + [self.row(c) for c in comparisons]
        widths = self.column_widths(rows)
        classes = [None] + [c.classification for c in comparisons]

        laid_out = []
        for cells, classification in zip(rows, classes):
            padded = [cells[0].ljust(widths[0])]
            padded += [cell.rjust(width) for cell, width in zip(cells[1:], widths[1:])]
            laid_out.append((padded, classification))
        return laid_out

    def render_text(self, comparisons: Sequence[Comparison]) -> List[Text]:
        texts = []
        for padded, classification in self.lines(comparisons):
            text = Text()
            if classification is None:
                text.append(COLUMN_GAP.join(padded), style="bold")
            else:
                # Only the diff columns carry the highlight.
                text.append(COLUMN_GAP.join(padded[:-2]) + COLUMN_GAP)
                text.append(
                    COLUMN_GAP.join(padded[-2:]),
                    style=CLASSIFICATION_STYLES[classification],
                )
            text.rstrip()
            texts.append(text)
        return texts

    def render(self, comparisons: Sequence[Comparison], sink: Optional[TextIO] = None) -> None:
        """Write the table to ``sink`` (standard output by default)."""
        console = Console(
            file=sink if sink is not None else sys.stdout,
            color_system="auto" if self.color else None,
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
        )
        for text in self.render_text(comparisons):
            console.print(text)


def write_table(
    renderer: TableRenderer,
    comparisons: Sequence[Comparison],
    out_file: Optional[str] = None,
) -> None:
    """Render to ``out_file`` when given, otherwise to standard output."""
    if out_file is None:
        renderer.render(comparisons)
        return
    try:
        with open(out_file, "w", encoding="utf-8") as f:
            renderer.render(comparisons, f)
    except OSError as e:
        raise OutputUnwritable(f"Cannot write '{out_file}': {e.strerror or e}") from e
    logging.info(f"Comparison table written to: {out_file}")
