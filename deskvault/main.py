"""
DeskVault - Main Application
Desktop Config Backup & Setup Tool
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from . import __version__, __app_name__
from .banner import print_banner, get_header
from .config import Settings, load_settings
from .exceptions import DeskVaultError
from .logging_utils import setup_logging
from .ui.menu import create_main_menu, get_keypress, run_menu, show_submenu
from .ui.colors import Colors
from .ui.status import StatusPrinter

from .backup.puller import BackupRunner
from .backup.restorer import RestoreRunner
from .postinstall.apps import AppInstaller
from .services.fan import FanServiceManager

logger = logging.getLogger(__name__)

FAN_ACTIONS = ("install", "uninstall", "status")


class DeskVault:
    """Main DeskVault application."""

    def __init__(self, settings: Settings, console: Console = None):
        self.settings = settings
        self.console = console or Console()
        self.status = StatusPrinter(self.console)

    def run(self) -> int:
        """Run the interactive main menu loop."""
        def show_banner():
            print_banner(self.console)

        while True:
            menu = create_main_menu(self.console)
            choice = run_menu(menu, header_func=show_banner)

            self.console.clear()
            print_banner(self.console, small=True)

            if choice == '0':
                self._exit()
                return 0
            elif choice == '1':
                self.backup()
            elif choice == '2':
                self.restore()
            elif choice == '3':
                self.install_apps()
            elif choice == '4':
                self._fan_service_menu()
            elif choice == '5':
                self.show_settings()

            self._wait_for_key()

    def _wait_for_key(self):
        """Wait for user to press a key."""
        self.console.print("\n[dim]Press any key to continue...[/]")
        get_keypress()

    def _fan_service_menu(self):
        def show_header():
            print_banner(self.console, small=True)
            self.console.print(get_header("Fan Service"))
            self.console.print()

        choice = show_submenu(
            self.console,
            "Fan Service Options",
            [
                ("1", "Install", "Install and enable the service"),
                ("2", "Uninstall", "Stop, disable and remove it"),
                ("3", "Status", "systemctl status"),
            ],
            header_func=show_header,
        )

        self.console.clear()
        print_banner(self.console, small=True)

        actions = {"1": "install", "2": "uninstall", "3": "status"}
        if choice in actions:
            self.fan_service(actions[choice])

    def backup(self, names: Optional[list[str]] = None, select_all: bool = False) -> int:
        self.console.print(get_header("📦 Config Backup"))
        logger.debug("Data directory: %s", self.settings.data_dir)
        logger.debug("Home directory: %s", self.settings.home_dir)

        runner = BackupRunner(self.settings, self.console)

        if select_all:
            items = list(self.settings.items)
        elif names:
            items = []
            for name in names:
                item = self.settings.item(name)
                if item is None:
                    known = ", ".join(i.key for i in self.settings.items)
                    self.status.error(f"Unknown item: {name} (known: {known})")
                    return 1
                items.append(item)
        else:
            items = runner.prompt_selection()
            if items is None:
                return 0

        if not items:
            self.status.warning("No configs selected")
            return 0

        self.status.info(f"Selected: {' '.join(i.key for i in items)}")
        runner.run(items)
        return 0

    def restore(self, latest: bool = False, list_only: bool = False) -> int:
        runner = RestoreRunner(self.settings, self.console)

        if list_only:
            runner.list_folders()
            return 0

        if latest:
            self.console.print(get_header("📥 Config Restore (Latest)"))
            return runner.restore_latest()

        self.console.print(get_header("📥 Config Restore (Interactive)"))
        return runner.restore_interactive()

    def install_apps(self, assume_yes: bool = False, dry_run: bool = False, force: bool = False) -> int:
        self.console.print(get_header("🚀 Install Applications"))

        installer = AppInstaller(self.settings, self.console, dry_run=dry_run)
        result = installer.run(assume_yes=assume_yes, force=force)

        if result.success:
            self.console.print(f"\n[bold green]✓ {result.message}[/]")
            return 0
        self.console.print(f"\n[bold red]✗ {result.message}[/]")
        return 1

    def fan_service(self, action: str = "install") -> int:
        manager = FanServiceManager(self.settings, self.console)
        if action == "uninstall":
            return manager.uninstall()
        if action == "status":
            return manager.show_status()
        return manager.install()

    def show_settings(self) -> int:
        """Show the effective settings."""
        self.console.print(get_header("Settings"))
        self.console.print()

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Setting", style="cyan")
        table.add_column("Value")

        s = self.settings
        for label, value in [
            ("Application", f"{__app_name__} v{__version__}"),
            ("Data directory", str(s.data_dir)),
            ("Home directory", str(s.home_dir)),
            ("Config directory", str(s.config_dir)),
            ("Chunk size", f"{s.chunk_size_mb} MB"),
            ("Backup items", ", ".join(i.key for i in s.items)),
            ("Fan files", str(len(s.fan_files))),
            ("Applications", str(len(s.apps))),
            ("Service", str(s.service_dir / s.service_name)),
            ("Log file", str(s.log_file)),
        ]:
            table.add_row(label, value)

        self.console.print(table)
        return 0

    def _exit(self):
        """Exit the application."""
        self.console.print(f"\n[bold {Colors.VAULT_TEAL}]Thank you for using {__app_name__}![/]\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deskvault",
        description="Back up and restore desktop configs, install apps and manage the fan service.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="TOML config file")
    parser.add_argument("--data-dir", type=Path, help="Directory holding backup folders")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")

    sub = parser.add_subparsers(dest="command")

    backup = sub.add_parser("backup", help="Back up configs into a new timestamped folder")
    backup.add_argument("-a", "--all", action="store_true", help="Back up everything, no menu")
    backup.add_argument("items", nargs="*", help="Item names to back up (skips the menu)")

    restore = sub.add_parser("restore", help="Restore configs from a backup folder")
    group = restore.add_mutually_exclusive_group()
    group.add_argument("-l", "--latest", action="store_true", help="Restore everything from the newest backup")
    group.add_argument("--list", action="store_true", help="List backup folders")

    apps = sub.add_parser("install-apps", help="Install desktop applications with pacman/yay")
    apps.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    apps.add_argument("--dry-run", action="store_true", help="Print commands without running them")
    apps.add_argument("--force", action="store_true", help="Run even on non-Arch systems")

    fan = sub.add_parser("fan-service", help="Manage the fan performance systemd service")
    fan.add_argument("action", nargs="?", default="install", choices=FAN_ACTIONS)

    sub.add_parser("settings", help="Show the effective settings")

    return parser


def dispatch(app: DeskVault, args: argparse.Namespace) -> int:
    if args.command == "backup":
        return app.backup(names=args.items, select_all=args.all)
    if args.command == "restore":
        return app.restore(latest=args.latest, list_only=args.list)
    if args.command == "install-apps":
        return app.install_apps(assume_yes=args.yes, dry_run=args.dry_run, force=args.force)
    if args.command == "fan-service":
        return app.fan_service(args.action)
    if args.command == "settings":
        return app.show_settings()
    return app.run()


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for DeskVault."""
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        settings = load_settings(config_file=args.config, data_dir=args.data_dir)
        setup_logging(console, verbose=args.verbose, log_file=settings.log_file)
        logger.debug("Started with args: %s", argv if argv is not None else sys.argv[1:])

        code = dispatch(DeskVault(settings, console), args)
        logger.debug("Completed with exit code %d", code)
        return code
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/]")
        return 130
    except DeskVaultError as e:
        console.print(f"\n[red]Error: {e}[/]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
