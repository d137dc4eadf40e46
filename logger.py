"""Logging utilities."""

import logging
import sys
from typing import Optional


class Logger:
    """Simple wrapper around :mod:`logging`.

    Diagnostics go to standard error so standard output stays free for the
    comparison table.

    Attributes
    ----------
    _logger : logging.Logger | None
        Internal logger instance used for all log output.
    """

    _logger = None

    @staticmethod
    def init_logging(level: str = "WARNING", log_path: Optional[str] = None) -> None:
        """Initialize logging to stderr and, optionally, to ``log_path``."""

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        handlers = [stream_handler]
        if log_path:
            file_handler = logging.FileHandler(log_path, mode="w")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            handlers.append(file_handler)

        logging.basicConfig(level=level, handlers=handlers, force=True)
        Logger._logger = logging.getLogger()

    @staticmethod
    def info(message: str) -> None:
        """Log an info level message."""
        if Logger._logger:
            Logger._logger.info(message)
        else:
            print(message, file=sys.stderr)

    @staticmethod
    def error(message: str) -> None:
        """Log an error level message and exit with status 1."""
        if Logger._logger:
            Logger._logger.error(message)
        else:
            print(f"ERROR: {message}", file=sys.stderr)
        sys.exit(1)

    @staticmethod
    def debug(message: str) -> None:
        """Log a debug level message."""
        if Logger._logger:
            Logger._logger.debug(message)

    @staticmethod
    def warning(message: str) -> None:
        """Log a warning level message."""
        if Logger._logger:
            Logger._logger.warning(message)
        else:
            print(f"WARNING: {message}", file=sys.stderr)
