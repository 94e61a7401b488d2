"""Backup and restore modules for DeskVault."""
from .store import BackupStore
from .puller import BackupRunner
from .restorer import RestoreRunner
