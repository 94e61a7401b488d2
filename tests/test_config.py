from pathlib import Path
from types import SimpleNamespace

import pytest

from deskvault import config
from deskvault.config import KIND_FILES, Settings, load_settings, resolve_home
from deskvault.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.delenv("DESKVAULT_DATA_DIR", raising=False)
    monkeypatch.delenv("DESKVAULT_CHUNK_MB", raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.chunk_size_mb == 90
    assert settings.chunk_size_bytes == 90 * 1024 * 1024
    assert [i.key for i in settings.items] == ["hyde", "hypr", "kitty", "fan_setup"]
    assert settings.item("fan_setup").kind == KIND_FILES
    assert len(settings.fan_files) == 13
    assert "visual-studio-code-bin" in settings.apps
    assert settings.service_name == "asus-max-perf.service"


def test_config_dir_follows_home(tmp_path):
    settings = load_settings()
    assert settings.home_dir == tmp_path
    assert settings.config_dir == tmp_path / ".config"
    assert settings.source_path(settings.item("kitty")) == tmp_path / ".config" / "kitty"


def test_toml_file_overrides(tmp_path):
    cfg = tmp_path / "deskvault.toml"
    cfg.write_text(
        'data_dir = "/srv/backups"\n'
        "chunk_size_mb = 45\n"
        'apps = ["firefox"]\n'
        "[[items]]\n"
        'key = "waybar"\n'
        "[[items]]\n"
        'key = "scripts"\n'
        'kind = "files"\n'
    )

    settings = load_settings(config_file=cfg)

    assert settings.data_dir == Path("/srv/backups")
    assert settings.chunk_size_mb == 45
    assert settings.apps == ["firefox"]
    assert [(i.key, i.kind, i.path) for i in settings.items] == [
        ("waybar", "directory", "waybar"),
        ("scripts", "files", ""),
    ]


def test_default_config_file_is_picked_up(tmp_path):
    cfg = tmp_path / ".config" / "deskvault" / "config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('service_name = "fan.service"\n')

    assert load_settings().service_name == "fan.service"


def test_env_beats_file_and_cli_beats_env(tmp_path):
    cfg = tmp_path / "deskvault.toml"
    cfg.write_text('data_dir = "/from/file"\nchunk_size_mb = 10\n')
    env = {"DESKVAULT_DATA_DIR": "/from/env", "DESKVAULT_CHUNK_MB": "20"}

    settings = load_settings(config_file=cfg, env=env)
    assert settings.data_dir == Path("/from/env")
    assert settings.chunk_size_mb == 20

    settings = load_settings(config_file=cfg, data_dir=Path("/from/cli"), env=env)
    assert settings.data_dir == Path("/from/cli")


def test_missing_explicit_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(config_file=tmp_path / "nope.toml")


def test_invalid_toml(tmp_path):
    cfg = tmp_path / "bad.toml"
    cfg.write_text("chunk_size_mb = = 3\n")
    with pytest.raises(ConfigError):
        load_settings(config_file=cfg)


@pytest.mark.parametrize("value", ["0", "-5", "lots"])
def test_bad_chunk_size(value):
    with pytest.raises(ConfigError):
        load_settings(env={"DESKVAULT_CHUNK_MB": value})


def test_unknown_item_kind(tmp_path):
    cfg = tmp_path / "deskvault.toml"
    cfg.write_text('[[items]]\nkey = "x"\nkind = "socket"\n')
    with pytest.raises(ConfigError):
        load_settings(config_file=cfg)


def test_unknown_item_lookup():
    assert Settings().item("nvim") is None


@pytest.fixture
def under_sudo(tmp_path, monkeypatch):
    """Pretend root ran us via sudo on behalf of user 'alice'."""
    user_home = tmp_path / "alice"
    user_home.mkdir()
    monkeypatch.setenv("HOME", str(tmp_path / "root"))
    monkeypatch.setenv("SUDO_USER", "alice")

    def getpwnam(name):
        if name != "alice":
            raise KeyError(name)
        return SimpleNamespace(pw_dir=str(user_home))

    monkeypatch.setattr(config.pwd, "getpwnam", getpwnam)
    return user_home


def test_resolve_home_looks_through_sudo(under_sudo):
    assert resolve_home() == under_sudo


def test_resolve_home_unknown_sudo_user(under_sudo, tmp_path, monkeypatch):
    monkeypatch.setenv("SUDO_USER", "ghost")
    assert resolve_home() == tmp_path / "root"


def test_sudo_reads_the_users_config_file(under_sudo):
    cfg = under_sudo / ".config" / "deskvault" / "config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('data_dir = "~/vault"\n')

    settings = load_settings()

    assert settings.home_dir == under_sudo
    assert settings.data_dir == under_sudo / "vault"
    assert settings.log_file == under_sudo / ".local" / "state" / "deskvault" / "deskvault.log"


def test_data_dir_in_source_checkout(tmp_path, monkeypatch):
    (tmp_path / "run.py").write_text("")
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    assert Settings().data_dir == tmp_path / "data"


def test_data_dir_when_installed(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path / "site-packages")
    assert Settings().data_dir == tmp_path / ".local" / "share" / "deskvault"
