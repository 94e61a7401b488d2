"""
Restore Module for DeskVault.
Restores config directories and fan/performance scripts from a backup
folder, merging chunked archives and keeping a safety copy of whatever
gets overwritten.
"""

import logging
import os
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console
from rich.prompt import Prompt

from ..config import KIND_DIRECTORY, BackupItem, Settings
from ..exceptions import ArchiveError, ChunkError, StoreError
from ..ui.colors import Colors, ItemResult, ItemStatus, RunSummary
from ..ui.menu import print_choices
from ..ui.status import StatusPrinter
from .archive import extract_archive
from .chunking import find_parts, merge_parts
from .selection import parse_folder_choice, parse_selection
from .store import BackupStore

logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIXES = (".py", ".sh")


@contextmanager
def staged_archive(
    folder: Path,
    item: BackupItem,
    status: StatusPrinter,
) -> Iterator[Optional[Path]]:
    """Yield the item's archive in folder, merging parts first if it was split.

    The merged file is removed on exit; the parts are kept. Yields None when
    neither the archive nor any parts exist.
    """
    archive = Path(folder) / item.archive_name
    parts = find_parts(archive)
    merged = False

    if parts:
        status.info(f"📦 Found {len(parts)} chunks, merging...")
        merge_parts(parts, archive)
        merged = True
    elif not archive.is_file():
        yield None
        return

    try:
        yield archive
    finally:
        if merged:
            archive.unlink(missing_ok=True)
            logger.debug("Removed temporary merged file")


def mark_executable(directory: Path, names: list[str]) -> list[Path]:
    """chmod +x the extracted scripts among names."""
    changed = []
    for name in names:
        path = Path(directory) / name
        if path.suffix in EXECUTABLE_SUFFIXES and path.is_file():
            mode = path.stat().st_mode
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            changed.append(path)
    return changed


def hand_back_to_user(paths: list[Path]) -> None:
    """Give files created as root under sudo back to the invoking user."""
    uid = os.environ.get("SUDO_UID")
    gid = os.environ.get("SUDO_GID")
    if os.geteuid() != 0 or not uid or not gid:
        return
    for path in paths:
        try:
            os.chown(path, int(uid), int(gid), follow_symlinks=False)
        except OSError as e:
            logger.debug("chown %s failed: %s", path, e)


class RestoreRunner:
    """Restores items from a backup folder into their original locations."""

    def __init__(self, settings: Settings, console: Console = None):
        self.settings = settings
        self.console = console or Console()
        self.status = StatusPrinter(self.console)
        self.store = BackupStore(settings.data_dir)

    def show_folders(self, folders: list[Path]) -> None:
        choices = []
        for folder in folders:
            names = self.store.archives_in(folder)
            choices.append((
                str(len(choices) + 1),
                f"{folder.name} [dim]({len(names)} files: {', '.join(names)})[/]",
            ))
        print_choices(
            self.console,
            "Available backup folders",
            choices,
            footer=[("0", "Cancel")],
        )

    def list_folders(self) -> list[Path]:
        """Print the folder listing and return the folders found."""
        logger.debug("Listing backup folders in: %s", self.settings.data_dir)
        try:
            folders = self.store.list_backup_folders()
        except StoreError as e:
            self.status.error(str(e))
            return []

        if not folders:
            self.status.warning("No backup folders found")
            return []

        self.show_folders(folders)
        return folders

    def select_folder(self) -> Optional[Path]:
        folders = self.list_folders()
        if not folders:
            return None

        answer = Prompt.ask("Backup number", default="", show_default=False, console=self.console)
        index, valid = parse_folder_choice(answer, len(folders))
        if not valid:
            self.status.warning("Invalid choice, using the latest backup")
        if index is None:
            return None
        return folders[index]

    def select_items(self, folder: Path) -> list[BackupItem]:
        self.console.print(f"[{Colors.VAULT_TEAL}]Available configs in this backup:[/]")
        for name in self.store.archives_in(folder):
            self.console.print(f"  - {name}")

        choices = [(str(i), item.key) for i, item in enumerate(self.settings.items, 1)]
        print_choices(self.console, "What to restore?", choices, footer=[("a", "All")])

        answer = Prompt.ask(
            "Select (space-separated, e.g. 1 2 3)",
            default="",
            show_default=False,
            console=self.console,
        )
        selection = parse_selection(answer, self.settings.items, empty_means_all=False)
        if selection.cancelled:
            return []
        for token in selection.invalid:
            self.status.warning(f"Invalid choice: {token}")
        return selection.items

    def restore_directory(self, folder: Path, item: BackupItem) -> ItemResult:
        """Restore a config directory into its parent, keeping a safety copy."""
        target = self.settings.source_path(item)

        logger.debug("Restoring %s", item.key)
        logger.debug("  Backup folder: %s", folder)
        logger.debug("  Target parent: %s", target.parent)

        try:
            with staged_archive(folder, item, self.status) as archive:
                if archive is None:
                    self.status.warning(
                        f"Archive not found: {folder / item.archive_name} - Skipping"
                    )
                    return ItemResult(item.key, ItemStatus.SKIPPED, "archive missing")

                safety = self.store.safety_backup(target, item.key)
                if safety:
                    self.status.info(f"Safety backup created: {safety.name}")

                self.status.info(f"Restoring {item.key}...")
                extract_archive(archive, target.parent)
        except (ArchiveError, ChunkError, StoreError, OSError) as e:
            logger.debug("Restore of %s failed: %s", item.key, e)
            self.status.error(f"Failed to restore {item.key}")
            return ItemResult(item.key, ItemStatus.FAILED, str(e))

        self.status.success(f"{item.key} restored successfully")
        return ItemResult(item.key, ItemStatus.DONE)

    def restore_files(self, folder: Path, item: BackupItem) -> ItemResult:
        """Restore fan/performance scripts into the home directory."""
        home = self.settings.home_dir
        logger.debug("Restoring fan files from: %s", folder / item.archive_name)

        try:
            with staged_archive(folder, item, self.status) as archive:
                if archive is None:
                    self.status.warning("Fan setup archive not found - Skipping")
                    return ItemResult(item.key, ItemStatus.SKIPPED, "archive missing")

                self.status.info(f"Restoring fan/performance scripts to {home}...")
                names = extract_archive(archive, home)

            logger.debug("Setting executable permissions...")
            mark_executable(home, names)
        except (ArchiveError, ChunkError, OSError) as e:
            logger.debug("Fan restore failed: %s", e)
            self.status.error("Failed to restore fan/performance files")
            return ItemResult(item.key, ItemStatus.FAILED, str(e))

        self.status.success("Fan/Performance scripts restored")
        hand_back_to_user([home / name for name in names])
        return ItemResult(item.key, ItemStatus.DONE, files=names)

    def restore_item(self, folder: Path, item: BackupItem) -> ItemResult:
        if item.kind == KIND_DIRECTORY:
            return self.restore_directory(folder, item)
        return self.restore_files(folder, item)

    def restore(self, folder: Path, items: list[BackupItem]) -> RunSummary:
        summary = RunSummary(title="Restore Summary")
        for item in items:
            summary.results.append(self.restore_item(folder, item))
        return summary

    def restore_interactive(self) -> int:
        """Pick a folder and items, then restore them. Returns an exit code."""
        logger.debug("Starting interactive restore")
        logger.debug("Data directory: %s", self.settings.data_dir)

        if not self.settings.data_dir.is_dir():
            self.status.error(f"Data directory not found: {self.settings.data_dir}")
            self.status.info("Run a backup first to create one")
            return 1

        folder = self.select_folder()
        if folder is None:
            self.status.warning("No backup selected")
            return 0

        self.status.info(f"Selected: {folder.name}")
        self.console.print()

        summary = self.restore(folder, self.select_items(folder))

        self.console.print()
        self.console.rule("[bold]✅ Restore Complete![/]", style=Colors.BORDER)
        self.status.info(f"Restored: {summary.succeeded} items")
        return 0

    def restore_latest(self) -> int:
        """Restore every item from the newest backup folder."""
        logger.debug("Starting restore from latest backup")

        folder = self.store.latest_backup_folder()
        if folder is None:
            self.status.error("No backup folders found")
            self.status.info("Run a backup first to create one")
            return 1

        self.status.info(f"Using backup: {folder.name}")
        self.console.print()

        summary = self.restore(folder, self.settings.items)

        self.console.print()
        self.status.success(f"Restored {summary.succeeded} items from latest backup")
        return 0
