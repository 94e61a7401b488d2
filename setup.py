#!/usr/bin/env python3
"""
DeskVault Setup Script
Desktop Config Backup & Setup Tool
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README if it exists
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="deskvault",
    version="1.0.0",
    description="Desktop Config Backup & Setup Tool",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Archiving :: Backup",
        "Topic :: Utilities",
    ],
    python_requires=">=3.11",
    install_requires=[
        "rich>=13.0.0",
        "psutil>=5.9.0",
        "distro>=1.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "deskvault=deskvault.main:main",
        ],
    },
    keywords=[
        "backup",
        "restore",
        "dotfiles",
        "hyprland",
        "arch",
        "systemd",
    ],
)
