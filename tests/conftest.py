import logging

import pytest

from logger import Logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by ``Logger.init_logging`` after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        # pytest's own capture handlers subclass these, keep them.
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    Logger._logger = None
