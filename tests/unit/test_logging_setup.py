"""Unit tests for icsprint.logging_setup."""

import logging
from collections.abc import Generator

import pytest
from colorlog import ColoredFormatter

from icsprint.logging_setup import NOISY_LOGGERS, configure_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def bare_root(monkeypatch: pytest.MonkeyPatch) -> Generator[logging.Logger, None, None]:
    """Give the test a root logger without handlers and restore levels afterwards."""
    root = logging.getLogger()
    saved_levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    saved_root_level = root.level
    monkeypatch.setattr(root, "handlers", [])
    yield root
    root.setLevel(saved_root_level)
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


def test_installs_colored_handler_once(
    bare_root: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    # pytest's logging plugin adds its capture handlers for the call phase
    monkeypatch.setattr(bare_root, "handlers", [])
    configure_logging("INFO")
    configure_logging("INFO")

    assert len(bare_root.handlers) == 1
    assert isinstance(bare_root.handlers[0].formatter, ColoredFormatter)


def test_level_name_is_case_insensitive(bare_root: logging.Logger) -> None:
    configure_logging("warning")

    assert bare_root.level == logging.WARNING


def test_unknown_level_means_info(bare_root: logging.Logger) -> None:
    configure_logging("LOUD")

    assert bare_root.level == logging.INFO


def test_third_party_loggers_quieted(bare_root: logging.Logger) -> None:
    configure_logging("DEBUG")

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_debug_environment_variable_forces_debug(
    bare_root: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ICSPRINT_DEBUG", "yes")

    configure_logging("ERROR")

    assert bare_root.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG

