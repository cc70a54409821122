"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from prsync.log import configure_logging, get_log_level


def test_default_level() -> None:
    assert get_log_level() == "INFO"


def test_env_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert get_log_level() == "WARNING"


def test_verbose_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert get_log_level(verbose=True) == "DEBUG"


def test_configure_installs_rich_handler() -> None:
    configure_logging(verbose=True)
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)
    assert logging.getLogger("httpx").level == logging.DEBUG

    configure_logging()
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING
