"""
Fan Service Module for DeskVault.
Installs, removes and inspects the systemd unit that runs the fan
performance script.
"""

import logging
import shutil
import time

from rich.console import Console

from ..backup.archive import extract_archive
from ..backup.restorer import hand_back_to_user, mark_executable, staged_archive
from ..backup.store import BackupStore
from ..config import KIND_FILES, Settings
from ..exceptions import ArchiveError, ChunkError
from ..system import Runner, is_root, run_command
from ..ui.colors import Colors
from ..ui.status import StatusPrinter

logger = logging.getLogger(__name__)


class FanServiceManager:
    """Manages the fan performance systemd service."""

    def __init__(
        self,
        settings: Settings,
        console: Console = None,
        runner: Runner = run_command,
        sleep=time.sleep,
    ):
        self.settings = settings
        self.console = console or Console()
        self.status = StatusPrinter(self.console)
        self.store = BackupStore(settings.data_dir)
        self.runner = runner
        self.sleep = sleep

    @property
    def unit(self) -> str:
        return self.settings.service_name

    @property
    def unit_path(self):
        return self.settings.service_dir / self.unit

    def _systemctl(self, *args: str) -> tuple[bool, str]:
        return self.runner(["systemctl", *args])

    def _require_root(self) -> bool:
        if is_root():
            return True
        self.status.error("This command must be run with sudo!")
        self.status.info("Usage: sudo deskvault fan-service <install|uninstall>")
        return False

    def _header(self, title: str) -> None:
        self.console.print()
        self.console.rule(f"[bold]{title}[/]", style=Colors.BORDER)
        self.console.print()

    def extract_fan_files(self) -> bool:
        """Unpack fan_setup from the newest backup into the home directory."""
        folder = self.store.latest_backup_folder()
        item = next((i for i in self.settings.items if i.kind == KIND_FILES), None)
        if folder is None or item is None:
            return False

        home = self.settings.home_dir
        try:
            with staged_archive(folder, item, self.status) as archive:
                if archive is None:
                    return False
                self.status.info(f"Found fan backup in {folder.name}")
                logger.debug("Archive: %s", archive)
                names = extract_archive(archive, home)
            mark_executable(home, names)
        except (ArchiveError, ChunkError, OSError) as e:
            self.status.warning(f"Could not extract fan files: {e}")
            return False

        hand_back_to_user([home / name for name in names])
        self.status.success(f"Fan files extracted to {home}")
        return True

    def install_service(self) -> bool:
        """Copy the unit file into the systemd directory."""
        src = self.settings.home_dir / self.unit
        dest = self.unit_path

        logger.debug("Installing service...")
        logger.debug("  Source: %s", src)
        logger.debug("  Destination: %s", dest)

        if not src.is_file():
            self.status.error(f"Service file not found: {src}")
            return False

        self.status.info(f"Copying service file to {self.settings.service_dir}...")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dest)
            dest.chmod(0o644)
        except OSError as e:
            self.status.error(f"Failed to copy service file: {e}")
            return False

        logger.debug("Service file copied successfully")
        return True

    def enable_service(self) -> bool:
        """Reload systemd, enable and start the unit, then check it is up."""
        steps = [
            ("Reloading systemd daemon...", ("daemon-reload",)),
            ("Enabling service to start on boot...", ("enable", self.unit)),
            ("Starting service...", ("start", self.unit)),
        ]
        for message, args in steps:
            self.status.info(message)
            success, output = self._systemctl(*args)
            if not success:
                self.status.error(f"systemctl {' '.join(args)} failed: {output.strip()}")
                return False

        self.sleep(1)
        running, _ = self._systemctl("is-active", "--quiet", self.unit)
        if running:
            self.status.success("Service is running!")
        else:
            self.status.warning(
                f"Service may not be running. Check with: systemctl status {self.unit}"
            )
        return True

    def show_status(self) -> int:
        self._header("📊 Service Status")
        _, output = self._systemctl("status", self.unit, "--no-pager")
        self.console.print(output.rstrip(), markup=False, highlight=False)
        return 0

    def install(self) -> int:
        if not self._require_root():
            return 1

        self._header("🔧 Installing Fan Performance Service")

        self.extract_fan_files()

        home = self.settings.home_dir
        fan_script = home / self.settings.fan_script
        service_file = home / self.unit
        if not fan_script.is_file() and not service_file.is_file():
            self.status.error("Required files not found!")
            self.status.info(f"Make sure these files exist in {home}:")
            self.status.info(f"  - {self.settings.fan_script}")
            self.status.info(f"  - {self.unit}")
            return 1
        if not fan_script.is_file():
            self.status.warning(f"Missing: {fan_script}")

        if not self.install_service() or not self.enable_service():
            return 1

        self.show_status()
        self.status.success("Installation complete!")
        self.status.info("Commands:")
        for label, cmd in [
            ("Check status", f"systemctl status {self.unit}"),
            ("Stop service", f"sudo systemctl stop {self.unit}"),
            ("Restart service", f"sudo systemctl restart {self.unit}"),
            ("View logs", f"journalctl -u {self.unit} -f"),
        ]:
            self.console.print(f"  - {label}: [cyan]{cmd}[/]")
        return 0

    def uninstall(self) -> int:
        if not self._require_root():
            return 1

        self._header("🗑️  Uninstalling Fan Service")

        self.status.info("Stopping service...")
        self._systemctl("stop", self.unit)
        self.status.info("Disabling service...")
        self._systemctl("disable", self.unit)

        self.status.info("Removing service file...")
        try:
            self.unit_path.unlink(missing_ok=True)
        except OSError as e:
            self.status.error(f"Failed to remove {self.unit_path}: {e}")
            return 1

        self.status.info("Reloading systemd daemon...")
        self._systemctl("daemon-reload")
        self.status.success("Service uninstalled!")
        return 0
