"""
Thin helpers around external commands and the host system.
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

# (cmd, sudo, timeout, capture) -> (success, output)
Runner = Callable[..., tuple[bool, str]]


def run_command(
    cmd: list[str],
    sudo: bool = False,
    timeout: int = 300,
    capture: bool = True,
) -> tuple[bool, str]:
    """Run a command and return (success, output).

    With capture=False the command inherits the terminal, which pacman,
    makepkg and yay need for their own prompts; output is then empty.
    """
    if sudo and os.geteuid() != 0:
        cmd = ["sudo"] + cmd

    logger.debug("CMD %s", " ".join(shlex.quote(c) for c in cmd))

    try:
        if capture:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
            output = result.stdout + result.stderr
        else:
            result = subprocess.run(cmd, timeout=timeout)
            output = ""
    except subprocess.TimeoutExpired:
        logger.debug("Timed out after %ss", timeout)
        return False, "Command timed out"
    except FileNotFoundError as e:
        logger.debug("Not found: %s", e)
        return False, str(e)

    logger.debug("Exit %d", result.returncode)
    return result.returncode == 0, output


def is_root() -> bool:
    return os.geteuid() == 0


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None
