"""
Split large archives into upload-sized parts and merge them back.

Part names follow split(1): <archive>.part_aa, <archive>.part_ab, ...
"""

import logging
import shutil
import string
from itertools import product
from pathlib import Path

from ..exceptions import ChunkError

logger = logging.getLogger(__name__)

PART_MARKER = ".part_"
COPY_BUFFER = 1024 * 1024

_SUFFIXES = ["".join(p) for p in product(string.ascii_lowercase, repeat=2)]


def part_suffix(index: int) -> str:
    if index >= len(_SUFFIXES):
        raise ChunkError(f"Too many parts (max {len(_SUFFIXES)})")
    return _SUFFIXES[index]


def needs_split(archive: Path, chunk_bytes: int) -> bool:
    return Path(archive).stat().st_size > chunk_bytes


def split_archive(archive: Path, chunk_bytes: int) -> list[Path]:
    """Split archive into parts of chunk_bytes and remove the original."""
    archive = Path(archive)
    if chunk_bytes <= 0:
        raise ChunkError(f"Invalid chunk size: {chunk_bytes}")

    size = archive.stat().st_size
    if size > len(_SUFFIXES) * chunk_bytes:
        raise ChunkError(f"{archive.name} needs more than {len(_SUFFIXES)} parts")

    parts: list[Path] = []
    try:
        with open(archive, "rb") as src:
            index = 0
            while True:
                part = archive.with_name(f"{archive.name}{PART_MARKER}{part_suffix(index)}")
                remaining = chunk_bytes
                with open(part, "wb") as dst:
                    while remaining:
                        block = src.read(min(COPY_BUFFER, remaining))
                        if not block:
                            break
                        dst.write(block)
                        remaining -= len(block)
                if remaining == chunk_bytes:
                    # Nothing was written; the previous part ended exactly at EOF.
                    part.unlink()
                    break
                parts.append(part)
                index += 1
                if remaining:
                    break
    except OSError as e:
        for part in parts:
            part.unlink(missing_ok=True)
        raise ChunkError(f"Failed to split {archive}: {e}")

    archive.unlink()
    logger.debug("Split %s into %d part(s)", archive.name, len(parts))
    return parts


def split_if_large(archive: Path, chunk_bytes: int) -> list[Path]:
    """Split archive when it is larger than chunk_bytes.

    Returns the parts, or an empty list when the archive was left whole.
    """
    size = Path(archive).stat().st_size
    logger.debug("File size: %d bytes (limit: %d bytes)", size, chunk_bytes)
    if size <= chunk_bytes:
        logger.debug("File size OK, no split needed")
        return []
    return split_archive(archive, chunk_bytes)


def find_parts(archive: Path) -> list[Path]:
    archive = Path(archive)
    if not archive.parent.is_dir():
        return []
    return sorted(archive.parent.glob(f"{archive.name}{PART_MARKER}*"))


def merge_parts(parts: list[Path], archive: Path) -> Path:
    """Concatenate parts, in name order, into archive."""
    if not parts:
        raise ChunkError(f"No parts to merge for {archive}")

    archive = Path(archive)
    try:
        with open(archive, "wb") as dst:
            for part in sorted(parts):
                with open(part, "rb") as src:
                    shutil.copyfileobj(src, dst, COPY_BUFFER)
    except OSError as e:
        archive.unlink(missing_ok=True)
        raise ChunkError(f"Failed to merge parts into {archive}: {e}")

    logger.debug("Merged %d part(s) into %s", len(parts), archive)
    return archive


def strip_part_suffix(name: str) -> str:
    """'hyde.tar.gz.part_ab' -> 'hyde.tar.gz'."""
    marker = name.rfind(PART_MARKER)
    return name[:marker] if marker != -1 else name
