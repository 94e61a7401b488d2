"""
Backup Module for DeskVault.
Archives config directories and fan/performance scripts into a new
timestamped backup folder.
"""

import logging
from pathlib import Path
from typing import Optional

import psutil
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from ..config import KIND_DIRECTORY, BackupItem, Settings
from ..exceptions import ArchiveError, ChunkError
from ..ui.colors import Colors, ItemResult, ItemStatus, RunSummary
from ..ui.menu import print_choices
from ..ui.progress import ProgressManager
from ..ui.status import StatusPrinter
from .archive import create_directory_archive, create_files_archive, human_size
from .chunking import split_if_large
from .selection import parse_selection
from .store import BackupStore

logger = logging.getLogger(__name__)

MIN_FREE_BYTES = 1024 ** 3


class BackupRunner:
    """Creates a backup folder and fills it with one archive per item."""

    def __init__(self, settings: Settings, console: Console = None):
        self.settings = settings
        self.console = console or Console()
        self.status = StatusPrinter(self.console)
        self.progress = ProgressManager(self.console)
        self.store = BackupStore(settings.data_dir)

    def show_selection_menu(self) -> None:
        choices = []
        for i, item in enumerate(self.settings.items, 1):
            choices.append((str(i), f"[bold]{item.key:<10}[/] - {item.label}"))

        print_choices(
            self.console,
            "Select configs to back up",
            choices,
            footer=[("a", "All"), ("q", "Quit")],
        )
        self.console.print(f"[{Colors.WARNING}]Enter numbers separated by spaces, e.g. 1 2 3[/]")
        self.console.print(f"[{Colors.WARNING}]Or 'a' to back up everything:[/]")

    def prompt_selection(self) -> Optional[list[BackupItem]]:
        """Ask which items to back up. None means the user quit."""
        self.show_selection_menu()
        answer = Prompt.ask("Selection", default="", show_default=False, console=self.console)

        selection = parse_selection(answer, self.settings.items)
        if selection.cancelled:
            self.status.info("Backup cancelled")
            return None
        for token in selection.invalid:
            self.status.warning(f"Invalid choice: {token}")
        return selection.items

    def check_free_space(self) -> None:
        target = self.settings.data_dir
        while not target.exists() and target != target.parent:
            target = target.parent
        free = psutil.disk_usage(str(target)).free
        logger.debug("Free space at %s: %d bytes", target, free)
        if free < MIN_FREE_BYTES:
            self.status.warning(
                f"Only {free / (1024 ** 3):.1f} GB free at {target}; backups may fail"
            )

    def _finish_archive(self, archive: Path) -> list[str]:
        """Split archive if needed and return the file names it ended up as."""
        parts = split_if_large(archive, self.settings.chunk_size_bytes)
        if not parts:
            return [archive.name]

        self.status.info(
            f"📦 File > {self.settings.chunk_size_mb}MB, split into {len(parts)} chunks"
        )
        for part in parts:
            logger.debug("  - %s (%s)", part.name, human_size(part))
        return [p.name for p in parts]

    def backup_directory(self, item: BackupItem, folder: Path) -> ItemResult:
        """Archive one config directory."""
        src_dir = self.settings.source_path(item)
        archive = folder / item.archive_name

        logger.debug("Starting backup for: %s", item.key)
        logger.debug("  Source: %s", src_dir)
        logger.debug("  Destination: %s", archive)

        if not src_dir.is_dir():
            self.status.warning(f"Directory not found: {src_dir} - Skipping")
            return ItemResult(item.key, ItemStatus.SKIPPED, "source missing")

        self.status.info(f"Backing up {item.key}...")
        try:
            with self.progress.status(f"Archiving {src_dir}..."):
                create_directory_archive(src_dir, archive)
            size = human_size(archive)
            self.status.success(f"{item.key} backup complete: {archive.name} ({size})")
            files = self._finish_archive(archive)
        except (ArchiveError, ChunkError) as e:
            logger.debug("Backup of %s failed: %s", item.key, e)
            self.status.error(f"Failed to backup {item.key}")
            return ItemResult(item.key, ItemStatus.FAILED, str(e))

        return ItemResult(item.key, ItemStatus.DONE, size, files)

    def backup_files(self, item: BackupItem, folder: Path) -> ItemResult:
        """Archive whichever fan/performance files exist in the home directory."""
        archive = folder / item.archive_name
        home = self.settings.home_dir

        logger.debug("Starting fan/performance files backup")
        logger.debug("  Destination: %s", archive)
        self.status.info("Backing up fan/performance scripts...")

        found = []
        for name in self.settings.fan_files:
            path = home / name
            if path.is_file():
                logger.debug("  Found: %s", name)
                found.append(path)
            else:
                logger.debug("  Not found: %s (skipping)", name)

        if not found:
            self.status.warning("No fan/performance files found - Skipping")
            return ItemResult(item.key, ItemStatus.SKIPPED, "no files")

        logger.debug("Found %d files to backup", len(found))
        try:
            create_files_archive(found, archive)
            size = human_size(archive)
            self.status.success(f"Fan/Performance backup complete: {archive.name} ({size})")
            files = self._finish_archive(archive)
        except (ArchiveError, ChunkError) as e:
            logger.debug("Fan backup failed: %s", e)
            self.status.error("Failed to backup fan/performance files")
            return ItemResult(item.key, ItemStatus.FAILED, str(e))

        return ItemResult(item.key, ItemStatus.DONE, f"{len(found)} files, {size}", files)

    def backup_item(self, item: BackupItem, folder: Path) -> ItemResult:
        if item.kind == KIND_DIRECTORY:
            return self.backup_directory(item, folder)
        return self.backup_files(item, folder)

    def run(self, items: list[BackupItem], timestamp: Optional[str] = None) -> RunSummary:
        """Back up items into a fresh backup folder."""
        summary = RunSummary(title="Backup Summary")
        self.check_free_space()

        folder = self.store.create_backup_folder(timestamp)
        self.status.info(f"Backup folder: {folder.name}")

        self.console.print("\n[bold]--- Backing up selected configs ---[/]\n")
        for item in items:
            summary.results.append(self.backup_item(item, folder))

        self.show_summary(summary, folder)
        return summary

    def show_summary(self, summary: RunSummary, folder: Path) -> None:
        self.console.print()
        self.console.rule(f"[bold]📊 {summary.title}[/]", style=Colors.BORDER)
        self.status.info(f"Completed: {summary.succeeded}/{summary.total} backups")
        self.status.info(f"Backup location: {folder}")

        archives = self.store.archive_files(folder)
        if not archives:
            return

        table = Table(title="Created archives", header_style=f"bold {Colors.VAULT_TEAL}")
        table.add_column("File", style="cyan")
        table.add_column("Size", justify="right")
        for path in archives:
            table.add_row(path.name, human_size(path))
        self.console.print(table)
