"""Parsing of raw micro-benchmark output into structured records."""

import io
import logging
import re
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional

from bench_errors import InputUnreadable

STDIN_MARKER = "-"
STDIN_LABEL = "stdin"

_NUMBER = r"-?[0-9][0-9,]*(?:\.[0-9]+)?"

# <name>  <iterations> iterations  <time> ns/iter (+/- <variance>) = <n> MB/s
ITERATION_LINE_RE = re.compile(
    rf"""
    ^\s*(?P<name>\S+)\s+
    (?P<iterations>[0-9][0-9,]*)\s+iterations\s+
    (?P<time>{_NUMBER})\s+ns/iter
    (?:\s+\(\+/-\s+(?P<variance>{_NUMBER})\))?
    (?:\s+=\s+(?P<throughput>{_NUMBER})\s+MB/s)?
    """,
    re.VERBOSE,
)

# test <name> ... bench:  <time> ns/iter (+/- <variance>) = <n> MB/s
LIBTEST_LINE_RE = re.compile(
    rf"""
    test\s+(?P<name>\S+)\s+\.\.\.\s+bench:\s+
    (?P<time>{_NUMBER})\s+ns/iter
    (?:\s+\(\+/-\s+(?P<variance>{_NUMBER})\))?
    (?:\s+=\s+(?P<throughput>{_NUMBER})\s+MB/s)?
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class BenchmarkRecord:
    """A single micro-benchmark result.

    Attributes
    ----------
    name : str
        Test identifier as printed by the harness, e.g. ``mod::bench_x``.
    iterations : int | None
        Iteration count. ``None`` for harness formats that do not report it.
    time_per_iter : float
        Nanoseconds per iteration.
    variance : float | None
        The ``(+/- N)`` spread, when the line carried one.
    throughput : float | None
        MB/s, when the line carried ``= N MB/s``.
    """

    name: str
    iterations: Optional[int]
    time_per_iter: float
    variance: Optional[float] = None
    throughput: Optional[float] = None

    def renamed(self, name: str) -> "BenchmarkRecord":
        """Return a copy of this record under a different name."""
        return BenchmarkRecord(
            name=name,
            iterations=self.iterations,
            time_per_iter=self.time_per_iter,
            variance=self.variance,
            throughput=self.throughput,
        )


@dataclass
class Source:
    """Records read from one input, labeled with where they came from."""

    label: str
    records: List[BenchmarkRecord]


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse ``text`` as a non-negative number, ignoring thousands separators."""
    if text is None:
        return None
    try:
        value = float(text.replace(",", ""))
    except ValueError:
        return None
    if value < 0:
        return None
    return value


def parse_line(line: str) -> Optional[BenchmarkRecord]:
    """Return the benchmark record encoded in ``line`` or ``None``.

    Lines that are not benchmark results (blank lines, headers, other log
    output) and lines with a negative or non-numeric time yield ``None``.
    """
    match = ITERATION_LINE_RE.match(line)
    iterations: Optional[int] = None
    if match:
        iterations = int(match.group("iterations").replace(",", ""))
    else:
        match = LIBTEST_LINE_RE.search(line)
        if not match:
            return None

    time_per_iter = parse_number(match.group("time"))
    if time_per_iter is None:
        return None

    # A malformed variance or throughput rejects the line.
    variance = parse_number(match.group("variance"))
    if match.group("variance") is not None and variance is None:
        return None
    throughput = parse_number(match.group("throughput"))
    if match.group("throughput") is not None and throughput is None:
        return None

    return BenchmarkRecord(
        name=match.group("name"),
        iterations=iterations,
        time_per_iter=time_per_iter,
        variance=variance,
        throughput=throughput,
    )


def parse_lines(lines: Iterable[str]) -> List[BenchmarkRecord]:
    """Parse every benchmark line in ``lines``, keeping source order."""
    records = []
    skipped = 0
    for line in lines:
        record = parse_line(line)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    logging.debug(f"Parsed {len(records)} records, skipped {skipped} lines")
    return records


def read_source(path: str) -> Source:
    """Read and parse one input source. ``-`` reads standard input."""
    if path == STDIN_MARKER:
        logging.info("Reading benchmarks from standard input")
        stream = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")
        try:
            records = parse_lines(stream)
        finally:
            # Leave the underlying stdin buffer open.
            stream.detach()
        return Source(label=STDIN_LABEL, records=records)

    logging.info(f"Reading benchmarks from {path}")
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            records = parse_lines(f)
    except OSError as e:
        raise InputUnreadable(path, e.strerror or str(e)) from e
    return Source(label=path, records=records)


def read_sources(paths: Iterable[str]) -> List[Source]:
    """Read every source in order, failing on the first unreadable one."""
    return [read_source(path) for path in paths]
