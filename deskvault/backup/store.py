"""
Layout of the backup data directory.

    data/
      20250101_120000/          backup folder, one archive (or parts) per item
        hyde.tar.gz
        kitty.tar.gz.part_aa
      safety_backups/           copies taken right before a restore
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..exceptions import StoreError
from .archive import create_directory_archive
from .chunking import PART_MARKER, strip_part_suffix

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
FOLDER_PATTERN = re.compile(r"^[0-9]{8}_[0-9]{6}$")
ARCHIVE_SUFFIX = ".tar.gz"


def make_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


class BackupStore:
    """Finds and creates backup folders under a data directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    @property
    def safety_dir(self) -> Path:
        return self.data_dir / "safety_backups"

    def create_backup_folder(self, timestamp: Optional[str] = None) -> Path:
        folder = self.data_dir / (timestamp or make_timestamp())
        logger.debug("Creating backup directory: %s", folder)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create backup folder {folder}: {e}")
        return folder

    def list_backup_folders(self) -> list[Path]:
        """Timestamp-named folders, newest first."""
        if not self.data_dir.is_dir():
            raise StoreError(f"Data directory not found: {self.data_dir}")

        folders = [
            p for p in self.data_dir.iterdir()
            if p.is_dir() and FOLDER_PATTERN.match(p.name)
        ]
        # The name is the creation time, so it sorts chronologically.
        return sorted(folders, key=lambda p: p.name, reverse=True)

    def latest_backup_folder(self) -> Optional[Path]:
        try:
            folders = self.list_backup_folders()
        except StoreError:
            return None
        return folders[0] if folders else None

    def archives_in(self, folder: Path) -> list[str]:
        """Item names stored in folder, whole or chunked."""
        names = set()
        for path in Path(folder).iterdir():
            if not path.is_file():
                continue
            name = strip_part_suffix(path.name) if PART_MARKER in path.name else path.name
            if name.endswith(ARCHIVE_SUFFIX):
                names.add(name[:-len(ARCHIVE_SUFFIX)])
        return sorted(names)

    def archive_files(self, folder: Path) -> list[Path]:
        """Archives and part files in folder, sorted by name."""
        return sorted(
            p for p in Path(folder).iterdir()
            if p.is_file() and ARCHIVE_SUFFIX in p.name
        )

    def safety_backup(self, target_dir: Path, name: str) -> Optional[Path]:
        """Archive target_dir into safety_backups/ if it exists."""
        target_dir = Path(target_dir)
        if not target_dir.is_dir():
            return None

        try:
            self.safety_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create {self.safety_dir}: {e}")
        archive = self.safety_dir / f"{name}_before_restore_{make_timestamp()}{ARCHIVE_SUFFIX}"
        logger.debug("Creating safety backup of current %s", name)
        return create_directory_archive(target_dir, archive)
