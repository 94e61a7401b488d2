"""
ASCII Banner for DeskVault
"""

from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from rich.align import Align

from . import __version__
from .ui.colors import Colors

BANNER = r"""
██████╗ ███████╗███████╗██╗  ██╗██╗   ██╗ █████╗ ██╗   ██╗██╗  ████████╗
██╔══██╗██╔════╝██╔════╝██║ ██╔╝██║   ██║██╔══██╗██║   ██║██║  ╚══██╔══╝
██║  ██║█████╗  ███████╗█████╔╝ ██║   ██║███████║██║   ██║██║     ██║
██║  ██║██╔══╝  ╚════██║██╔═██╗ ╚██╗ ██╔╝██╔══██║██║   ██║██║     ██║
██████╔╝███████╗███████║██║  ██╗ ╚████╔╝ ██║  ██║╚██████╔╝███████╗██║
╚═════╝ ╚══════╝╚══════╝╚═╝  ╚═╝  ╚═══╝  ╚═╝  ╚═╝ ╚═════╝ ╚══════╝╚═╝
"""

BANNER_SMALL = "DeskVault"

TAGLINE = "Desktop Config Backup & Setup Tool"


def get_gradient_banner() -> Text:
    """Create a gradient-colored banner."""
    text = Text()
    lines = BANNER.strip().split('\n')

    colors = [Colors.VAULT_TEAL, Colors.VAULT_DARK, Colors.VAULT_LIGHT]

    for i, line in enumerate(lines):
        color = colors[i % len(colors)]
        text.append(line + "\n", style=f"bold {color}")

    return text


def print_banner(console: Console = None, small: bool = False, clear: bool = False) -> None:
    """Print the DeskVault banner with styling."""
    if console is None:
        console = Console()

    if clear:
        console.clear()

    if small:
        banner = Text(BANNER_SMALL, style=f"bold {Colors.VAULT_TEAL}")
    else:
        banner = get_gradient_banner()

    info = Text()
    info.append(f"\n{TAGLINE} ", style="bold white")
    info.append(f"| v{__version__}", style="dim yellow")

    full_banner = Text()
    full_banner.append_text(banner)
    full_banner.append_text(info)

    console.print(Panel(
        Align.center(full_banner),
        border_style=Colors.BORDER,
        padding=(1, 2),
    ))
    console.print()


def get_header(title: str) -> Panel:
    """Create a styled header panel for sections."""
    return Panel(
        Align.center(Text(title, style="bold white")),
        border_style=Colors.BORDER,
        padding=(0, 2),
    )
