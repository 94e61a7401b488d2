import stat

import pytest

from deskvault.backup.archive import create_files_archive
from deskvault.services import fan
from deskvault.services.fan import FanServiceManager
from tests.conftest import FakeRunner, output_of

UNIT = "asus-max-perf.service"


@pytest.fixture(autouse=True)
def as_root(monkeypatch):
    monkeypatch.setattr(fan, "is_root", lambda: True)
    monkeypatch.delenv("SUDO_UID", raising=False)
    monkeypatch.delenv("SUDO_GID", raising=False)


@pytest.fixture
def runner():
    return FakeRunner(results={("systemctl", "status"): (True, "active (running)\n")})


@pytest.fixture
def manager(settings, console, runner):
    return FanServiceManager(settings, console, runner=runner, sleep=lambda s: None)


def test_install_from_home_files(manager, settings, populated_home, runner):
    assert manager.install() == 0

    unit = settings.service_dir / UNIT
    assert unit.read_text() == (populated_home / UNIT).read_text()
    assert stat.S_IMODE(unit.stat().st_mode) == 0o644
    assert runner.commands == [
        ["systemctl", "daemon-reload"],
        ["systemctl", "enable", UNIT],
        ["systemctl", "start", UNIT],
        ["systemctl", "is-active", "--quiet", UNIT],
        ["systemctl", "status", UNIT, "--no-pager"],
    ]


def test_install_extracts_latest_backup(manager, settings, home, tmp_path):
    src = tmp_path / "fan"
    src.mkdir()
    (src / UNIT).write_text("[Service]\nExecStart=/usr/bin/python3 max_perf_v2.py\n")
    (src / "max_perf_v2.py").write_text("print()\n")
    folder = settings.data_dir / "20250101_120000"
    folder.mkdir(parents=True)
    create_files_archive(sorted(src.iterdir()), folder / "fan_setup.tar.gz")

    assert manager.install() == 0
    assert (home / "max_perf_v2.py").exists()
    assert (settings.service_dir / UNIT).exists()


def test_chmod_failure_after_extract_only_warns(
    manager, settings, tmp_path, console, monkeypatch
):
    src = tmp_path / "fan"
    src.mkdir()
    (src / "max_perf_v2.py").write_text("print()\n")
    folder = settings.data_dir / "20250101_120000"
    folder.mkdir(parents=True)
    create_files_archive(sorted(src.iterdir()), folder / "fan_setup.tar.gz")

    def refuse(directory, names):
        raise PermissionError("read-only home")

    monkeypatch.setattr(fan, "mark_executable", refuse)

    assert manager.extract_fan_files() is False
    assert "Could not extract fan files: read-only home" in output_of(console)


def test_install_without_files(manager, console, runner):
    assert manager.install() == 1
    assert "Required files not found" in output_of(console)
    assert runner.calls == []


def test_install_needs_root(manager, console, monkeypatch):
    monkeypatch.setattr(fan, "is_root", lambda: False)
    assert manager.install() == 1
    assert "must be run with sudo" in output_of(console)


def test_inactive_service_only_warns(settings, console, populated_home):
    runner = FakeRunner(results={("systemctl", "is-active"): (False, "")})
    manager = FanServiceManager(settings, console, runner=runner, sleep=lambda s: None)

    assert manager.install() == 0
    assert "may not be running" in output_of(console)


def test_failed_enable_aborts(settings, console, populated_home):
    runner = FakeRunner(results={("systemctl", "enable"): (False, "Unit not found")})
    manager = FanServiceManager(settings, console, runner=runner, sleep=lambda s: None)

    assert manager.install() == 1
    assert ["systemctl", "start", UNIT] not in runner.commands


def test_uninstall(manager, settings, runner):
    unit = settings.service_dir / UNIT
    unit.parent.mkdir(parents=True)
    unit.write_text("[Unit]\n")

    assert manager.uninstall() == 0
    assert not unit.exists()
    assert runner.commands == [
        ["systemctl", "stop", UNIT],
        ["systemctl", "disable", UNIT],
        ["systemctl", "daemon-reload"],
    ]


def test_uninstall_ignores_stop_errors(settings, console):
    runner = FakeRunner(results={("systemctl", "stop"): (False, "not loaded")})
    manager = FanServiceManager(settings, console, runner=runner)

    assert manager.uninstall() == 0


def test_status_does_not_need_root(manager, console, runner, monkeypatch):
    monkeypatch.setattr(fan, "is_root", lambda: False)
    assert manager.show_status() == 0
    assert "active (running)" in output_of(console)
