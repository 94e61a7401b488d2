"""systemd service management for DeskVault."""
from .fan import FanServiceManager
