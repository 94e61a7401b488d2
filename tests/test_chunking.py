import os

import pytest

from deskvault.backup.chunking import (
    find_parts,
    merge_parts,
    part_suffix,
    split_archive,
    split_if_large,
    strip_part_suffix,
)
from deskvault.exceptions import ChunkError


def write_bytes(path, size):
    data = os.urandom(size)
    path.write_bytes(data)
    return data


def test_small_file_is_left_alone(tmp_path):
    archive = tmp_path / "kitty.tar.gz"
    write_bytes(archive, 100)

    assert split_if_large(archive, 1000) == []
    assert archive.exists()
    assert find_parts(archive) == []


def test_file_at_threshold_is_not_split(tmp_path):
    archive = tmp_path / "kitty.tar.gz"
    write_bytes(archive, 1000)

    assert split_if_large(archive, 1000) == []
    assert archive.exists()


def test_split_names_and_sizes(tmp_path):
    archive = tmp_path / "hyde.tar.gz"
    write_bytes(archive, 2500)

    parts = split_if_large(archive, 1000)

    assert [p.name for p in parts] == [
        "hyde.tar.gz.part_aa",
        "hyde.tar.gz.part_ab",
        "hyde.tar.gz.part_ac",
    ]
    assert [p.stat().st_size for p in parts] == [1000, 1000, 500]
    assert not archive.exists()


def test_exact_multiple_has_no_empty_tail(tmp_path):
    archive = tmp_path / "hyde.tar.gz"
    write_bytes(archive, 2000)

    parts = split_archive(archive, 1000)

    assert len(parts) == 2
    assert find_parts(archive) == parts


def test_merge_restores_original_bytes(tmp_path):
    archive = tmp_path / "hyde.tar.gz"
    original = write_bytes(archive, 3333)
    split_archive(archive, 1000)

    parts = find_parts(archive)
    merge_parts(list(reversed(parts)), archive)

    assert archive.read_bytes() == original
    assert all(p.exists() for p in parts)


def test_find_parts_ignores_other_items(tmp_path):
    (tmp_path / "hyde.tar.gz.part_ab").write_bytes(b"b")
    (tmp_path / "hyde.tar.gz.part_aa").write_bytes(b"a")
    (tmp_path / "hypr.tar.gz.part_aa").write_bytes(b"x")

    parts = find_parts(tmp_path / "hyde.tar.gz")
    assert [p.name for p in parts] == ["hyde.tar.gz.part_aa", "hyde.tar.gz.part_ab"]


def test_merge_without_parts(tmp_path):
    with pytest.raises(ChunkError):
        merge_parts([], tmp_path / "x.tar.gz")


def test_suffix_sequence():
    assert part_suffix(0) == "aa"
    assert part_suffix(1) == "ab"
    assert part_suffix(26) == "ba"
    assert part_suffix(675) == "zz"
    with pytest.raises(ChunkError):
        part_suffix(676)


def test_too_many_parts(tmp_path):
    archive = tmp_path / "big.tar.gz"
    write_bytes(archive, 677)
    with pytest.raises(ChunkError):
        split_archive(archive, 1)
    assert archive.exists()


def test_strip_part_suffix():
    assert strip_part_suffix("hyde.tar.gz.part_ab") == "hyde.tar.gz"
    assert strip_part_suffix("hyde.tar.gz") == "hyde.tar.gz"
