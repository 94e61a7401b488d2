"""UI components for DeskVault."""
from .colors import Colors, StatusIcon, ItemStatus, ItemResult, RunSummary
from .progress import ProgressManager
from .menu import Menu, MenuItem
from .status import StatusPrinter
