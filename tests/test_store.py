import pytest

from deskvault.backup.archive import archive_members
from deskvault.backup.store import BackupStore, make_timestamp
from deskvault.exceptions import StoreError


def test_create_backup_folder(tmp_path):
    store = BackupStore(tmp_path / "data")
    folder = store.create_backup_folder("20250101_120000")
    assert folder == tmp_path / "data" / "20250101_120000"
    assert folder.is_dir()


def test_create_backup_folder_under_a_file(tmp_path):
    (tmp_path / "blocker").write_text("")
    store = BackupStore(tmp_path / "blocker" / "data")
    with pytest.raises(StoreError):
        store.create_backup_folder("20250101_120000")


def test_timestamp_format():
    stamp = make_timestamp()
    assert len(stamp) == 15 and stamp[8] == "_"


def test_listing_filters_and_sorts(tmp_path):
    store = BackupStore(tmp_path)
    for name in ("20250101_120000", "20250301_080000", "20250201_235959",
                 "safety_backups", "notes", "2025_bad"):
        (tmp_path / name).mkdir()
    (tmp_path / "20250401_000000").write_text("a file, not a folder")

    names = [p.name for p in store.list_backup_folders()]

    assert names == ["20250301_080000", "20250201_235959", "20250101_120000"]
    assert store.latest_backup_folder().name == "20250301_080000"


def test_missing_data_dir(tmp_path):
    store = BackupStore(tmp_path / "missing")
    with pytest.raises(StoreError):
        store.list_backup_folders()
    assert store.latest_backup_folder() is None


def test_no_folders(tmp_path):
    assert BackupStore(tmp_path).latest_backup_folder() is None


def test_archives_in_counts_chunked_items_once(tmp_path):
    folder = tmp_path / "20250101_120000"
    folder.mkdir()
    for name in ("kitty.tar.gz", "hyde.tar.gz.part_aa", "hyde.tar.gz.part_ab", "README"):
        (folder / name).write_bytes(b"x")

    store = BackupStore(tmp_path)
    assert store.archives_in(folder) == ["hyde", "kitty"]
    assert [p.name for p in store.archive_files(folder)] == [
        "hyde.tar.gz.part_aa",
        "hyde.tar.gz.part_ab",
        "kitty.tar.gz",
    ]


def test_safety_backup(tmp_path):
    target = tmp_path / "config" / "hypr"
    target.mkdir(parents=True)
    (target / "hyprland.conf").write_text("monitor=,preferred,auto,1\n")
    store = BackupStore(tmp_path / "data")

    archive = store.safety_backup(target, "hypr")

    assert archive.parent == tmp_path / "data" / "safety_backups"
    assert archive.name.startswith("hypr_before_restore_")
    assert "hypr/hyprland.conf" in archive_members(archive)


def test_safety_backup_skips_missing_target(tmp_path):
    store = BackupStore(tmp_path / "data")
    assert store.safety_backup(tmp_path / "absent", "hypr") is None
    assert not store.safety_dir.exists()


def test_safety_backup_when_safety_dir_is_a_file(tmp_path):
    target = tmp_path / "config" / "kitty"
    target.mkdir(parents=True)
    store = BackupStore(tmp_path / "data")
    store.data_dir.mkdir()
    store.safety_dir.write_text("")

    with pytest.raises(StoreError):
        store.safety_backup(target, "kitty")
