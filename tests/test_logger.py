"""Unit tests for the logging wrapper"""

import logging

import pytest

from logger import Logger


def test_error_without_logging_prints_and_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        Logger.error("boom")
    assert excinfo.value.code == 1
    assert capsys.readouterr().err == "ERROR: boom\n"


def test_init_logging_writes_stderr_and_file(tmp_path, capsys):
    log_path = tmp_path / "benchcmp.log"
    Logger.init_logging("INFO", str(log_path))
    Logger.info("hello")
    Logger.debug("hidden")

    err = capsys.readouterr().err
    assert "[INFO] hello" in err
    assert "hidden" not in err
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "[INFO] hello" in log_path.read_text()


def test_warning_goes_to_stderr(capsys):
    Logger.init_logging("WARNING")
    Logger.warning("careful")
    Logger.info("quiet")
    err = capsys.readouterr().err
    assert "[WARNING] careful" in err
    assert "quiet" not in err
