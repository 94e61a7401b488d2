"""
Color definitions, status icons and result types for the DeskVault UI.
"""

from enum import Enum
from dataclasses import dataclass, field


class Colors:
    """Color palette for DeskVault."""

    # Primary colors
    VAULT_TEAL = "#1ABC9C"
    VAULT_DARK = "#16A085"
    VAULT_LIGHT = "#48C9B0"

    # Status colors
    SUCCESS = "#2ECC71"
    WARNING = "#F39C12"
    ERROR = "#E74C3C"
    INFO = "#3498DB"

    # UI colors
    BORDER = "#1ABC9C"
    DIM = "#7F8C8D"


class StatusIcon:
    """Unicode icons for status display."""

    # Menu icons
    BACKUP = "[bold green]📦[/]"
    RESTORE = "[bold cyan]📥[/]"
    INSTALL = "[bold magenta]🚀[/]"
    FAN = "[bold yellow]🌀[/]"
    SETTINGS = "[dim]⚙️[/]"
    EXIT = "[dim]🚪[/]"

    BULLET = "●"


class ItemStatus(Enum):
    """Outcome of processing one backup item."""
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ItemResult:
    """Result of backing up or restoring a single item."""
    name: str
    status: ItemStatus
    message: str = ""
    files: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ItemStatus.DONE


@dataclass
class RunSummary:
    """Results of a backup or restore run."""
    title: str
    results: list[ItemResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def total(self) -> int:
        return len(self.results)
