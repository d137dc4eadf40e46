"""Percentage change and classification of matched benchmark pairs.

Sign convention: ``pct_change = (second - first) / first * 100``. A negative
change means the second run is faster (an improvement), a positive change
means it is slower (a regression).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from bench_record import BenchmarkRecord
from grouper import MatchedPair


class Undefined:
    """Percentage change against a zero baseline with a non-zero comparator."""

    _instance = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()

Percentage = Union[float, Undefined]


class Classification(Enum):
    IMPROVEMENT = "improvement"
    REGRESSION = "regression"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Comparison:
    """Result of comparing a baseline record with its counterpart."""

    name: str
    first: BenchmarkRecord
    second: BenchmarkRecord
    pct_change: Percentage
    abs_delta: float
    classification: Classification
    variance_shown: Optional[Tuple[Optional[float], Optional[float]]] = None

    @property
    def pct_defined(self) -> bool:
        return not isinstance(self.pct_change, Undefined)


def percentage_change(first: float, second: float) -> Percentage:
    """Return the change from ``first`` to ``second`` in percent.

    Both zero is no change. A zero baseline against a non-zero value has no
    percentage representation and yields ``UNDEFINED``.
    """
    if first == 0:
        return 0.0 if second == 0 else UNDEFINED
    return (second - first) / first * 100.0


def classify(first: float, second: float) -> Classification:
    """Lower time in ``second`` is an improvement, higher a regression."""
    if second < first:
        return Classification.IMPROVEMENT
    if second > first:
        return Classification.REGRESSION
    return Classification.NEUTRAL


def compare(pair: MatchedPair, show_variance: bool = False) -> Comparison:
    """Compare a matched pair using its first record as the baseline."""
    first, second = pair.first, pair.second
    return Comparison(
        name=pair.name,
        first=first,
        second=second,
        pct_change=percentage_change(first.time_per_iter, second.time_per_iter),
        abs_delta=second.time_per_iter - first.time_per_iter,
        classification=classify(first.time_per_iter, second.time_per_iter),
        variance_shown=(first.variance, second.variance) if show_variance else None,
    )


def compare_all(pairs: Iterable[MatchedPair], show_variance: bool = False) -> List[Comparison]:
    return [compare(pair, show_variance) for pair in pairs]
