"""Post-installation automation modules for DeskVault."""
from .apps import AppInstaller
