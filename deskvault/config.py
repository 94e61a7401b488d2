"""
Settings for DeskVault.

Defaults are built in; an optional TOML file, environment variables and
command line options override them in that order.
"""

import os
import pwd
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_FILE = Path(".config/deskvault/config.toml")
USER_DATA_DIR = Path(".local/share/deskvault")
LOG_FILE = Path(".local/state/deskvault/deskvault.log")

ENV_DATA_DIR = "DESKVAULT_DATA_DIR"
ENV_CHUNK_MB = "DESKVAULT_CHUNK_MB"

KIND_DIRECTORY = "directory"
KIND_FILES = "files"


@dataclass(frozen=True)
class BackupItem:
    """A named thing that gets its own archive in a backup folder."""
    key: str
    label: str
    kind: str
    path: str = ""

    @property
    def archive_name(self) -> str:
        return f"{self.key}.tar.gz"


DEFAULT_FAN_FILES = [
    "asus_fan_monitor.py",
    "asus-max-perf.service",
    "asus-max-performance.service",
    "max_perf.sh",
    "max_perf_v2.py",
    "max_performance.py",
    "setup_fan.sh",
    "debug_fan_state.py",
    "force_fan_loop.py",
    "force_max_fan.py",
    "restore_fan.py",
    "revive_fan_acpi.py",
    "test_fan_response.py",
]

DEFAULT_APPS = [
    "google-chrome",
    "antigravity-bin",
    "postman-bin",
    "dbeaver",
    "obsidian",
    "obs-studio",
    "visual-studio-code-bin",
    "slack-desktop",
    "fcitx5",
    "fcitx5-configtool",
    "fcitx5-unikey",
    "fcitx5-gtk",
    "fcitx5-qt",
    "mongodb-compass",
    "docker-desktop",
]


def default_items() -> list[BackupItem]:
    return [
        BackupItem("hyde", "~/.config/hyde", KIND_DIRECTORY, "hyde"),
        BackupItem("hypr", "~/.config/hypr", KIND_DIRECTORY, "hypr"),
        BackupItem("kitty", "~/.config/kitty", KIND_DIRECTORY, "kitty"),
        BackupItem("fan_setup", "Fan/Performance scripts", KIND_FILES),
    ]


def resolve_home() -> Path:
    """Home of the invoking user, looking through sudo."""
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user and sudo_user != "root":
        try:
            return Path(pwd.getpwnam(sudo_user).pw_dir)
        except KeyError:
            pass
    return Path.home()


def expand_user_path(value) -> Path:
    """expanduser() against the invoking user's home rather than $HOME."""
    path = Path(value)
    if path.parts and path.parts[0] == "~":
        return resolve_home().joinpath(*path.parts[1:])
    return path.expanduser()


def default_data_dir() -> Path:
    """data/ next to the package in a source checkout, else a per-user dir."""
    if (PROJECT_ROOT / "run.py").is_file():
        return PROJECT_ROOT / "data"
    return resolve_home() / USER_DATA_DIR


@dataclass(frozen=True)
class Settings:
    """Everything DeskVault needs to know about paths and targets."""
    data_dir: Path = field(default_factory=default_data_dir)
    home_dir: Path = field(default_factory=resolve_home)
    chunk_size_mb: int = 90
    service_dir: Path = Path("/etc/systemd/system")
    service_name: str = "asus-max-perf.service"
    fan_script: str = "max_perf_v2.py"
    items: list[BackupItem] = field(default_factory=default_items)
    fan_files: list[str] = field(default_factory=lambda: list(DEFAULT_FAN_FILES))
    apps: list[str] = field(default_factory=lambda: list(DEFAULT_APPS))
    log_file: Path = field(default_factory=lambda: resolve_home() / LOG_FILE)

    @property
    def config_dir(self) -> Path:
        return self.home_dir / ".config"

    @property
    def chunk_size_bytes(self) -> int:
        return self.chunk_size_mb * 1024 * 1024

    def item(self, key: str) -> Optional[BackupItem]:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def source_path(self, item: BackupItem) -> Path:
        """Directory a directory-kind item is archived from and restored into."""
        return self.config_dir / Path(item.path or item.key).expanduser()


def _parse_items(raw: list) -> list[BackupItem]:
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or "key" not in entry:
            raise ConfigError("Each [[items]] entry needs a 'key'")
        kind = entry.get("kind", KIND_DIRECTORY)
        if kind not in (KIND_DIRECTORY, KIND_FILES):
            raise ConfigError(f"Unknown item kind for {entry['key']}: {kind}")
        items.append(BackupItem(
            key=entry["key"],
            label=entry.get("label", entry["key"]),
            kind=kind,
            path=entry.get("path", entry["key"] if kind == KIND_DIRECTORY else ""),
        ))
    return items


def _chunk_size(value) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid chunk size: {value!r}")
    if size <= 0:
        raise ConfigError(f"Chunk size must be positive, got {size}")
    return size


def load_settings(
    config_file: Optional[Path] = None,
    data_dir: Optional[Path] = None,
    env: Optional[dict] = None,
) -> Settings:
    """Build settings from defaults, config file, environment and overrides."""
    env = os.environ if env is None else env
    overrides: dict = {}

    path = expand_user_path(config_file) if config_file else resolve_home() / CONFIG_FILE
    if config_file and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path.is_file():
        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if "data_dir" in raw:
            overrides["data_dir"] = expand_user_path(raw["data_dir"])
        if "chunk_size_mb" in raw:
            overrides["chunk_size_mb"] = _chunk_size(raw["chunk_size_mb"])
        for key in ("service_name", "fan_script"):
            if key in raw:
                overrides[key] = str(raw[key])
        for key in ("apps", "fan_files"):
            if key in raw:
                if not isinstance(raw[key], list):
                    raise ConfigError(f"'{key}' must be a list")
                overrides[key] = [str(v) for v in raw[key]]
        if "items" in raw:
            overrides["items"] = _parse_items(raw["items"])

    if env.get(ENV_DATA_DIR):
        overrides["data_dir"] = expand_user_path(env[ENV_DATA_DIR])
    if env.get(ENV_CHUNK_MB):
        overrides["chunk_size_mb"] = _chunk_size(env[ENV_CHUNK_MB])

    if data_dir:
        overrides["data_dir"] = expand_user_path(data_dir)

    return replace(Settings(), **overrides)
