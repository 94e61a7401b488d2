"""
Logging setup for DeskVault.

Debug traces go through the standard logging module. The console only shows
them with --verbose; the log file always gets everything.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

STATUS_LOGGER = "deskvault.status"


def setup_logging(
    console: Console,
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure the 'deskvault' logger and return it."""
    logger = logging.getLogger("deskvault")
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    status_logger = logging.getLogger(STATUS_LOGGER)
    status_logger.propagate = False
    for handler in status_logger.handlers[:]:
        status_logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    rich_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(rich_handler)

    if log_file:
        fmt = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"
        )
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning("Could not set up file logging to %s: %s", log_file, e)
        else:
            file_handler.setFormatter(fmt)
            file_handler.setLevel(logging.DEBUG)
            logger.addHandler(file_handler)
            # Status lines are already on screen; mirror them to the file only.
            status_logger.addHandler(file_handler)

    return logger
