"""
Interactive TUI menu system for DeskVault.
"""

import sys
from dataclasses import dataclass, field
from typing import Callable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED

from .colors import Colors, StatusIcon


@dataclass
class MenuItem:
    """A single menu item."""
    key: str
    label: str
    icon: str
    description: str = ""


@dataclass
class Menu:
    """Interactive menu with keyboard navigation."""
    title: str
    items: list[MenuItem] = field(default_factory=list)
    subtitle: str = ""
    selected_index: int = 0
    console: Console = field(default_factory=Console)

    def add_item(
        self,
        key: str,
        label: str,
        icon: str,
        description: str = "",
    ) -> 'Menu':
        """Add a menu item and return self for chaining."""
        self.items.append(MenuItem(
            key=key,
            label=label,
            icon=icon,
            description=description,
        ))
        return self

    def render(self) -> Panel:
        """Render the menu as a panel."""
        table = Table(
            show_header=False,
            box=None,
            padding=(0, 2),
            collapse_padding=True,
            expand=True,
        )
        table.add_column("Key", justify="center", width=5)
        table.add_column("Icon", justify="center", width=4)
        table.add_column("Label", justify="left")
        table.add_column("Desc", justify="right", style="dim")

        for i, item in enumerate(self.items):
            is_selected = i == self.selected_index

            if is_selected:
                key_style = f"bold {Colors.VAULT_LIGHT} reverse"
                label_style = f"bold {Colors.VAULT_LIGHT}"
                desc_style = Colors.VAULT_LIGHT
            else:
                key_style = f"bold {Colors.VAULT_TEAL}"
                label_style = "white"
                desc_style = "dim"

            selector = "▸ " if is_selected else "  "

            table.add_row(
                Text(f"[{item.key}]", style=key_style),
                item.icon,
                Text(f"{selector}{item.label}", style=label_style),
                Text(item.description, style=desc_style),
            )

        title_text = Text()
        title_text.append(f"  {self.title}  ", style=f"bold {Colors.VAULT_TEAL}")

        return Panel(
            table,
            title=title_text,
            title_align="center",
            subtitle=Text(self.subtitle, style="dim italic") if self.subtitle else None,
            border_style=Colors.BORDER,
            box=ROUNDED,
            padding=(1, 2),
        )

    def move_up(self):
        """Move selection up."""
        self.selected_index = (self.selected_index - 1) % len(self.items)

    def move_down(self):
        """Move selection down."""
        self.selected_index = (self.selected_index + 1) % len(self.items)

    def get_key_action(self, key: str) -> Optional[MenuItem]:
        """Get menu item by key."""
        for item in self.items:
            if item.key.lower() == key.lower():
                return item
        return None


def create_main_menu(console: Console = None) -> Menu:
    """Create the main DeskVault menu."""
    menu = Menu(
        title="DeskVault - Main Menu",
        subtitle="Arrow keys to navigate, Enter to select, or press the key shortcut",
        console=console or Console(),
    )

    menu.add_item("1", "Backup Configs", StatusIcon.BACKUP,
                  description="Archive configs and fan scripts")
    menu.add_item("2", "Restore Configs", StatusIcon.RESTORE,
                  description="Restore from a backup folder")
    menu.add_item("3", "Install Apps", StatusIcon.INSTALL,
                  description="pacman + yay applications")
    menu.add_item("4", "Fan Service", StatusIcon.FAN,
                  description="Install/remove systemd unit")
    menu.add_item("5", "Settings", StatusIcon.SETTINGS,
                  description="Show current paths")
    menu.add_item("0", "Exit", StatusIcon.EXIT,
                  description="Quit DeskVault")

    return menu


def get_keypress() -> str:
    """Get a single keypress from the user."""
    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)

        if ch == '\x1b':  # Escape sequence
            ch2 = sys.stdin.read(1)
            if ch2 == '[':
                ch3 = sys.stdin.read(1)
                if ch3 == 'A':
                    return 'up'
                elif ch3 == 'B':
                    return 'down'
                elif ch3 == 'C':
                    return 'right'
                elif ch3 == 'D':
                    return 'left'
            return 'escape'
        elif ch == '\r' or ch == '\n':
            return 'enter'
        elif ch == '\x03':  # Ctrl+C
            return 'ctrl+c'
        elif ch == 'q' or ch == 'Q':
            return 'q'

        return ch
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def run_menu(
    menu: Menu,
    header_func: Callable = None,
    keypress: Callable[[], str] = get_keypress,
) -> Optional[str]:
    """Run an interactive menu and return the selected key."""
    console = menu.console

    def redraw():
        console.clear()
        if header_func:
            header_func()
        console.print(menu.render())

    redraw()

    while True:
        key = keypress()

        if key == 'up':
            menu.move_up()
            redraw()
        elif key == 'down':
            menu.move_down()
            redraw()
        elif key == 'enter':
            item = menu.items[menu.selected_index]
            return item.key
        elif key == 'escape' or key == 'q' or key == 'ctrl+c':
            return '0'  # Exit
        else:
            # Check for direct key press
            item = menu.get_key_action(key)
            if item:
                for i, m in enumerate(menu.items):
                    if m.key == item.key:
                        menu.selected_index = i
                        return item.key


def show_submenu(
    console: Console,
    title: str,
    options: list[tuple[str, str, str]],  # (key, label, description)
    header_func: Callable = None,
) -> Optional[str]:
    """Show a simple submenu and return selected key."""
    menu = Menu(title=title, console=console)

    for key, label, desc in options:
        menu.add_item(key, label, StatusIcon.BULLET, description=desc)

    menu.add_item("0", "Back", StatusIcon.EXIT, description="Return to main menu")

    return run_menu(menu, header_func=header_func)


def print_choices(
    console: Console,
    title: str,
    choices: list[tuple[str, str]],  # (key, text)
    footer: list[tuple[str, str]] = None,
) -> None:
    """Print a numbered selection list for free-text input."""
    console.print()
    console.print(Panel(
        Text(title, style="bold white"),
        border_style=Colors.BORDER,
        padding=(0, 2),
    ))

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style=f"bold {Colors.VAULT_TEAL}", justify="right")
    table.add_column("Choice")

    for key, text in choices:
        table.add_row(f"{key})", text)
    if footer:
        table.add_row("", "[dim]---[/]")
        for key, text in footer:
            table.add_row(f"{key})", text)

    console.print(table)
    console.print()
