"""
gzip tar archives for config directories and loose files.
"""

import logging
import tarfile
from pathlib import Path
from typing import Iterable

from ..exceptions import ArchiveError

logger = logging.getLogger(__name__)


def create_directory_archive(src_dir: Path, archive_path: Path) -> Path:
    """Archive src_dir so it extracts as a single top-level directory.

    Same layout as `tar -czf archive -C parent basename`.
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise ArchiveError(f"Directory not found: {src_dir}")

    logger.debug("Archiving %s -> %s", src_dir, archive_path)
    try:
        with tarfile.open(archive_path, "w:gz") as tar:
            tar.add(str(src_dir), arcname=src_dir.name)
    except (OSError, tarfile.TarError) as e:
        Path(archive_path).unlink(missing_ok=True)
        raise ArchiveError(f"Failed to archive {src_dir}: {e}")

    return Path(archive_path)


def create_files_archive(files: Iterable[Path], archive_path: Path) -> Path:
    """Archive files flat, each one at the archive root."""
    files = [Path(f) for f in files]
    if not files:
        raise ArchiveError("No files to archive")

    logger.debug("Archiving %d file(s) -> %s", len(files), archive_path)
    try:
        with tarfile.open(archive_path, "w:gz") as tar:
            for path in files:
                tar.add(str(path), arcname=path.name)
    except (OSError, tarfile.TarError) as e:
        Path(archive_path).unlink(missing_ok=True)
        raise ArchiveError(f"Failed to create {archive_path}: {e}")

    return Path(archive_path)


def archive_members(archive_path: Path) -> list[str]:
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            return tar.getnames()
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Cannot read {archive_path}: {e}")


def extract_archive(archive_path: Path, dest_dir: Path) -> list[str]:
    """Extract archive_path into dest_dir and return the member names."""
    archive_path = Path(archive_path)
    if not archive_path.is_file():
        raise ArchiveError(f"Archive not found: {archive_path}")

    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)

    logger.debug("Extracting %s -> %s", archive_path, dest_dir)
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            names = tar.getnames()
            # "tar" keeps symlinks, which config trees like hyde rely on.
            tar.extractall(dest_dir, filter="tar")
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Failed to extract {archive_path}: {e}")

    return names


def format_size(num_bytes: int) -> str:
    """Format a byte count the way `du -h` does: 4.0K, 12M, 1.2G."""
    if num_bytes < 1024:
        return str(num_bytes)

    size = num_bytes / 1024
    for unit in ("K", "M", "G", "T"):
        # Check the rounded value so 1023.9K rolls over to 1.0M.
        if size < 9.95:
            return f"{size:.1f}{unit}"
        if size < 1023.5 or unit == "T":
            return f"{size:.0f}{unit}"
        size /= 1024


def human_size(path: Path) -> str:
    path = Path(path)
    if not path.is_file():
        return "0"
    return format_size(path.stat().st_size)
