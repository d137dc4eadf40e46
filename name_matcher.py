"""Decide whether two benchmark names denote the same test."""

import re
from typing import Optional

from bench_errors import ConfigurationError


def compile_strip_pattern(pattern: Optional[str], option: str) -> Optional[re.Pattern]:
    """Compile a user supplied strip pattern.

    ``option`` names the command line option the pattern came from and is
    only used in the error message.
    """
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex for {option} '{pattern}': {e}") from e


class NameMatcher:
    """Pairs names after removing an optional pattern from each side.

    Parameters
    ----------
    strip_fst : str, optional
        Regex removed from names of the first group.
    strip_snd : str, optional
        Regex removed from names of the second group.
    """

    def __init__(
        self, strip_fst: Optional[str] = None, strip_snd: Optional[str] = None
    ) -> None:
        self.strip_fst = compile_strip_pattern(strip_fst, "--strip-fst")
        self.strip_snd = compile_strip_pattern(strip_snd, "--strip-snd")

    @staticmethod
    def _strip(pattern: Optional[re.Pattern], name: str) -> str:
        if pattern is None:
            return name
        return pattern.sub("", name)

    def strip_first(self, name: str) -> str:
        return self._strip(self.strip_fst, name)

    def strip_second(self, name: str) -> str:
        return self._strip(self.strip_snd, name)

    def matches(self, first: str, second: str) -> bool:
        """True when ``first`` and ``second`` are equal once stripped."""
        return self.strip_first(first) == self.strip_second(second)
