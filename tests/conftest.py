import io
from dataclasses import replace
from pathlib import Path

import pytest
from rich.console import Console

from deskvault.config import Settings


class FakeRunner:
    """Records commands and answers them from a table of canned results."""

    def __init__(self, results=None, default=(True, "")):
        self.calls = []
        self.results = results or {}
        self.default = default

    def __call__(self, cmd, sudo=False, timeout=300, capture=True):
        self.calls.append((list(cmd), sudo))
        for prefix, result in self.results.items():
            if tuple(cmd[:len(prefix)]) == prefix:
                return result
        return self.default

    @property
    def commands(self):
        return [cmd for cmd, _ in self.calls]


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)


def output_of(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    (path / ".config").mkdir(parents=True)
    return path


@pytest.fixture
def settings(tmp_path, home) -> Settings:
    return replace(
        Settings(),
        data_dir=tmp_path / "data",
        home_dir=home,
        chunk_size_mb=1,
        service_dir=tmp_path / "systemd",
        log_file=tmp_path / "deskvault.log",
    )


@pytest.fixture
def populated_home(home):
    """A home directory with the three config dirs and two fan files."""
    for name in ("hyde", "hypr", "kitty"):
        cfg = home / ".config" / name
        cfg.mkdir()
        (cfg / f"{name}.conf").write_text(f"# {name} config\n")
    (home / ".config" / "hypr" / "themes").mkdir()
    (home / ".config" / "hypr" / "themes" / "dark.conf").write_text("col = 0\n")
    (home / "max_perf_v2.py").write_text("print('fan')\n")
    (home / "asus-max-perf.service").write_text("[Unit]\nDescription=fan\n")
    return home
