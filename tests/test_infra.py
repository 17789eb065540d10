"""Tests for logging setup and notifiers."""

import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from expiry_tracker.infra.logging_setup import setup_logging
from expiry_tracker.infra.notifier import ConsoleNotifier, LoggingNotifier


def test_setup_logging_installs_rich_handler() -> None:
    """Configures the root logger with a single Rich handler."""
    logger = setup_logging("DEBUG")

    root = logging.getLogger()
    assert logger.name == "expiry_tracker"
    assert root.level == logging.DEBUG
    assert any(isinstance(handler, RichHandler) for handler in root.handlers)
    setup_logging("WARNING")


def test_logging_notifier(caplog: pytest.LogCaptureFixture) -> None:
    """Writes notifications to the package log."""
    with caplog.at_level(logging.INFO):
        LoggingNotifier().notify("Data imported successfully!")

    assert "Data imported successfully!" in caplog.text


def test_console_notifier() -> None:
    """Prints notifications to the console."""
    console = Console(record=True, width=120)

    ConsoleNotifier(console).notify("All data cleared!")

    assert "All data cleared!" in console.export_text()
