"""
Colored console logging for fstoolkit

Every line has the shape ``[<TAG>] <message>``. Tags are colored with rich;
when stdout is not a terminal the colors are dropped and plain text is
written.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.text import Text


INFO_STYLE = "green"
WARN_STYLE = "yellow"
ERROR_STYLE = "red"
LABEL_STYLE = "bright_black"


class ConsoleLogger:
    """Prints severity tagged lines to standard output"""

    def __init__(self, console: Optional[Console] = None):
        # Console() without a file resolves sys.stdout on every print
        self.console = console or Console(highlight=False, soft_wrap=True)

    def _print(self, tag: str, style: str, message: str) -> None:
        self.console.print(Text.assemble("[", (tag, style), "] ", str(message)))

    def info(self, message: str) -> None:
        """[INFO] This is an info."""
        self._print("INFO", INFO_STYLE, message)

    def warn(self, message: str) -> None:
        """[WARN] This is a warning."""
        self._print("WARN", WARN_STYLE, message)

    def error(self, message: str) -> None:
        """[ERROR] This is an error."""
        self._print("ERROR", ERROR_STYLE, message)

    def label(self, tag: str, message: str) -> None:
        """[<tag>] This is an example."""
        self._print(str(tag), LABEL_STYLE, message)


class ConsoleHandler(logging.Handler):
    """Logging handler that renders records through a ConsoleLogger"""

    def __init__(self, console_logger: Optional[ConsoleLogger] = None, level=logging.NOTSET):
        super().__init__(level)
        self.console_logger = console_logger or default_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                self.console_logger.error(message)
            elif record.levelno >= logging.WARNING:
                self.console_logger.warn(message)
            else:
                self.console_logger.info(message)
        except Exception:
            self.handleError(record)


default_logger = ConsoleLogger()


def info(message: str) -> None:
    default_logger.info(message)


def warn(message: str) -> None:
    default_logger.warn(message)


def error(message: str) -> None:
    default_logger.error(message)


def label(tag: str, message: str) -> None:
    default_logger.label(tag, message)
