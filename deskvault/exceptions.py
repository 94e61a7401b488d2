"""
Exception hierarchy for DeskVault.
"""


class DeskVaultError(Exception):
    """Base class for all DeskVault errors."""


class ConfigError(DeskVaultError):
    """Invalid or unreadable configuration."""


class ArchiveError(DeskVaultError):
    """A tar archive could not be created or extracted."""


class ChunkError(DeskVaultError):
    """An archive could not be split into or merged from parts."""


class StoreError(DeskVaultError):
    """The backup data directory is missing or unusable."""


class CommandError(DeskVaultError):
    """An external command failed."""

    def __init__(self, step: str, output: str = ""):
        super().__init__(f"{step} failed")
        self.step = step
        self.output = output
