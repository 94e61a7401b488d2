"""
Progress bars and spinners for DeskVault.
"""

from contextlib import contextmanager

from rich.console import Console

from .colors import Colors


class ProgressManager:
    """Manager for animated progress displays."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    @contextmanager
    def status(self, message: str):
        """Context manager for showing a spinner with status message."""
        with self.console.status(
            f"[bold {Colors.VAULT_TEAL}]{message}",
            spinner="dots",
            spinner_style=f"bold {Colors.VAULT_LIGHT}",
        ):
            yield
