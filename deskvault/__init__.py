"""
DeskVault - Desktop Config Backup & Setup Tool

Backs up and restores desktop configuration (HyDE, Hyprland, Kitty) and
fan/performance scripts, installs desktop applications on Arch-based systems,
and manages the fan performance systemd service.
"""

__version__ = "1.0.0"
__author__ = "deskvault"
__app_name__ = "DeskVault"
