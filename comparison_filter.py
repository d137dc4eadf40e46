"""Selection of comparisons by direction and significance."""

import math
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from bench_errors import ConfigurationError
from delta_engine import Classification, Comparison


class Show(Enum):
    """Which directions of change to keep."""

    REGRESSIONS = "regressions"
    IMPROVEMENTS = "improvements"
    BOTH = "both"

    @classmethod
    def from_flags(cls, regressions: bool, improvements: bool) -> "Show":
        """Map the ``--regressions``/``--improvements`` flags to a ``Show``.

        Neither or both flags select ``BOTH``.
        """
        if regressions and not improvements:
            return cls.REGRESSIONS
        if improvements and not regressions:
            return cls.IMPROVEMENTS
        return cls.BOTH

    @property
    def classifications(self) -> FrozenSet[Classification]:
        if self is Show.REGRESSIONS:
            return frozenset({Classification.REGRESSION})
        if self is Show.IMPROVEMENTS:
            return frozenset({Classification.IMPROVEMENT})
        return frozenset(Classification)


class ComparisonFilter:
    """Keep comparisons in the requested direction whose change is large enough.

    Parameters
    ----------
    threshold : float, optional
        Minimum absolute percentage change. ``None`` disables the check.
        An undefined percentage passes every threshold.
    show : Show
        Directions of change to keep.
    """

    def __init__(self, threshold: Optional[float] = None, show: Show = Show.BOTH) -> None:
        if threshold is not None and (not math.isfinite(threshold) or threshold < 0):
            raise ConfigurationError(
                f"--threshold must be a finite non-negative number, got {threshold}"
            )
        self.threshold = threshold
        self.show = show

    def meets_threshold(self, comparison: Comparison) -> bool:
        if self.threshold is None or not comparison.pct_defined:
            return True
        return abs(comparison.pct_change) >= self.threshold

    def accepts(self, comparison: Comparison) -> bool:
        return (
            comparison.classification in self.show.classifications
            and self.meets_threshold(comparison)
        )

    def apply(self, comparisons: Iterable[Comparison]) -> List[Comparison]:
        """Filter ``comparisons``, preserving their order."""
        return [c for c in comparisons if self.accepts(c)]
