#!/usr/bin/env python3
"""
DeskVault Launcher
Desktop Config Backup & Setup Tool

Run this script to start DeskVault:
    python run.py
    or
    ./run.py backup --all
"""

import sys
import os

# Add the project directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from deskvault.main import main

if __name__ == "__main__":
    sys.exit(main())
