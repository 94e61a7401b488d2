"""
Colored [INFO]/[SUCCESS]/[WARNING]/[ERROR] status lines.
"""

import logging

from rich.console import Console
from rich.markup import escape

from ..logging_utils import STATUS_LOGGER

status_log = logging.getLogger(STATUS_LOGGER)


class StatusPrinter:
    """Prints status lines to the console and mirrors them to the log file."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def _emit(self, tag: str, style: str, level: int, message: str) -> None:
        self.console.print(f"[{style}]\\[{tag}][/] {escape(message)}")
        status_log.log(level, message)

    def info(self, message: str) -> None:
        self._emit("INFO", "bold blue", logging.INFO, message)

    def success(self, message: str) -> None:
        self._emit("SUCCESS", "bold green", logging.INFO, message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", "bold yellow", logging.WARNING, message)

    def error(self, message: str) -> None:
        self._emit("ERROR", "bold red", logging.ERROR, message)
