"""Error types raised by the comparison engine and its I/O edges."""

from typing import Optional


class BenchCmpError(Exception):
    """Base class for errors that abort a benchcmp invocation."""


class ConfigurationError(BenchCmpError, ValueError):
    """Invalid option combination, argument count, pattern or format."""


class InputUnreadable(BenchCmpError, OSError):
    """A named input source could not be opened or read."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        message = f"Cannot read '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class RendererUnavailable(BenchCmpError, RuntimeError):
    """The chart renderer is missing or failed to produce an artifact."""


class OutputUnwritable(BenchCmpError, OSError):
    """The table destination could not be written."""
