import logging
from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Outward interface for user-facing notifications."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Deliver a notification message.

        Args:
            message: Text to show the user.
        """


class LoggingNotifier(Notifier):
    """Notifier that writes messages to the package log."""

    def notify(self, message: str) -> None:
        logger.info(message)


class ConsoleNotifier(Notifier):
    """Notifier that prints messages to a Rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def notify(self, message: str) -> None:
        self._console.print(f"[bold cyan]Knowledge Expiry Tracker:[/bold cyan] {message}")
