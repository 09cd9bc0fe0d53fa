"""Tests for CLI logging configuration."""

from __future__ import annotations

import io
import logging
import sys
from collections.abc import Iterator

import pytest

from odataq.logging_config import LOGGER_NAME, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    configure_logging(False)


def test_configure_logging_verbose_adds_single_stdout_handler() -> None:
    """Verbose mode logs INFO through one stream handler."""
    configure_logging(True)
    configure_logging(True)

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_quiet_clears_handlers() -> None:
    """Quiet mode only lets warnings through and removes handlers."""
    configure_logging(True)
    configure_logging(False)

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.WARNING
    assert logger.handlers == []


def test_configure_logging_verbose_writes_messages(capsys: pytest.CaptureFixture[str]) -> None:
    """INFO messages reach stdout without decoration."""
    configure_logging(True)

    logging.getLogger(LOGGER_NAME).info("Query: %s", "$top=1")

    assert "Query: $top=1" in capsys.readouterr().out


def test_configure_logging_rebinds_to_current_stdout(
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Reconfiguring picks up a replaced stdout."""
    configure_logging(True)
    replacement = io.StringIO()
    monkeypatch.setattr(sys, "stdout", replacement)
    configure_logging(True)

    get_logger().info("Query: %s", "$skip=2")

    assert replacement.getvalue() == "Query: $skip=2\n"
    assert capsys.readouterr().out == ""


def test_get_logger_returns_package_logger() -> None:
    """Library modules share the package logger."""
    assert get_logger() is logging.getLogger(LOGGER_NAME)
