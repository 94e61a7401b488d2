"""
Application Installer Module for DeskVault.
Updates the system with pacman, bootstraps the yay AUR helper and installs
the desktop application list.
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path

import distro
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from ..config import Settings
from ..exceptions import CommandError
from ..system import Runner, command_exists, is_root, run_command
from ..ui.colors import Colors
from ..ui.status import StatusPrinter

logger = logging.getLogger(__name__)

YAY_REPO = "https://aur.archlinux.org/yay.git"
BASE_PACKAGES = ["git", "base-devel"]


@dataclass
class InstallResult:
    """Result of the application installation."""
    success: bool
    message: str
    packages_installed: list[str] = field(default_factory=list)
    failed_step: str = ""


@dataclass
class InstallStep:
    description: str
    cmd: list[str]
    sudo: bool = False
    cwd: str = ""
    timeout: int = 3600


class AppInstaller:
    """Manages pacman/yay application installation."""

    def __init__(
        self,
        settings: Settings,
        console: Console = None,
        runner: Runner = run_command,
        dry_run: bool = False,
    ):
        self.settings = settings
        self.console = console or Console()
        self.status = StatusPrinter(self.console)
        self.runner = runner
        self.dry_run = dry_run

    @property
    def yay_dir(self) -> Path:
        return self.settings.home_dir / "yay"

    def is_arch_based(self) -> bool:
        ids = {distro.id()} | set(distro.like().split())
        logger.debug("Distribution ids: %s", ids)
        return "arch" in ids

    def is_package_installed(self, package: str) -> bool:
        success, _ = self.runner(["pacman", "-Q", package])
        return success

    def show_apps_status(self) -> list[str]:
        """Display which apps are installed and return the missing ones."""
        table = Table(title="Applications", header_style=f"bold {Colors.VAULT_TEAL}")
        table.add_column("Package", style="cyan")
        table.add_column("Status", justify="center")

        missing = []
        for package in self.settings.apps:
            if self.is_package_installed(package):
                table.add_row(package, "[green]installed[/]")
            else:
                table.add_row(package, "[yellow]missing[/]")
                missing.append(package)

        self.console.print(table)
        return missing

    def plan(self) -> list[InstallStep]:
        """The command sequence for a full install."""
        steps = [
            InstallStep("Updating system", ["pacman", "-Syyu", "--noconfirm"], sudo=True),
            InstallStep(
                "Installing git and base-devel",
                ["pacman", "-S", "--needed", "--noconfirm"] + BASE_PACKAGES,
                sudo=True,
            ),
        ]

        if not command_exists("yay"):
            if not (self.yay_dir / "PKGBUILD").is_file():
                steps.append(InstallStep(
                    "Cloning yay",
                    ["git", "clone", YAY_REPO, str(self.yay_dir)],
                    timeout=600,
                ))
            steps.append(InstallStep(
                "Building yay",
                ["makepkg", "-si", "--noconfirm"],
                cwd=str(self.yay_dir),
            ))

        steps.append(InstallStep("Updating AUR packages", ["yay", "-Syu", "--noconfirm"]))
        steps.append(InstallStep(
            "Installing applications",
            ["yay", "-S", "--needed", "--noconfirm"] + list(self.settings.apps),
        ))
        return steps

    def _run_step(self, step: InstallStep) -> None:
        cmd = step.cmd
        if step.cwd:
            # makepkg has no -C option; hop into the directory via a shell.
            cmd = ["sh", "-c", f"cd {shlex.quote(step.cwd)} && {shlex.join(step.cmd)}"]

        if self.dry_run:
            prefix = "sudo " if step.sudo else ""
            self.console.print(f"[dim]$ {prefix}{shlex.join(cmd)}[/]")
            return

        self.status.info(f"{step.description}...")
        success, output = self.runner(cmd, sudo=step.sudo, timeout=step.timeout, capture=False)
        if not success:
            raise CommandError(step.description, output)

    def install_all(self) -> InstallResult:
        """Run the full install sequence, stopping at the first failing step."""
        if is_root() and not self.dry_run:
            return InstallResult(
                success=False,
                message="Run as a normal user; makepkg and yay refuse to run as root",
            )

        try:
            for step in self.plan():
                self._run_step(step)
        except CommandError as e:
            logger.debug("Step output: %s", e.output)
            return InstallResult(
                success=False,
                message=f"Failed at: {e.step}",
                failed_step=e.step,
            )

        if self.dry_run:
            return InstallResult(success=True, message="Dry run complete")

        installed = [pkg for pkg in self.settings.apps if self.is_package_installed(pkg)]
        return InstallResult(
            success=True,
            message=f"Installed {len(installed)}/{len(self.settings.apps)} application(s)",
            packages_installed=installed,
        )

    def run(self, assume_yes: bool = False, force: bool = False) -> InstallResult:
        """Run application installation interactively."""
        if not self.is_arch_based() and not force:
            return InstallResult(
                success=False,
                message=f"{distro.name() or 'This system'} is not Arch-based (use --force to try anyway)",
            )

        if not self.dry_run:
            missing = self.show_apps_status()
            self.console.print()
            if not missing:
                self.status.info("All applications already installed; updating anyway")

        if not assume_yes and not self.dry_run:
            if not Confirm.ask("📦 Update the system and install applications?", console=self.console):
                return InstallResult(success=True, message="Application installation skipped")

        return self.install_all()
