"""Tests for logging setup."""

import logging
import logging.handlers
from pathlib import Path

import pytest

from formwizard.config.models import LoggingConfig
from formwizard.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_silent_by_default() -> None:
    setup_logging(LoggingConfig())
    root = logging.getLogger()
    assert [type(h) for h in root.handlers] == [logging.NullHandler]
    assert root.level == logging.INFO


def test_file_and_console(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "formwizard.log"
    setup_logging(LoggingConfig(level="debug", file=str(log_file), log_to_console=True))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert any(type(h) is logging.StreamHandler for h in root.handlers)

    logging.getLogger("formwizard.test").debug("draft written")
    for h in root.handlers:
        h.flush()
    assert "draft written" in log_file.read_text()
