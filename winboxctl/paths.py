# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for winboxctl.

Paths are organized by context:

- HostPaths: Paths on the host machine (where winboxctl runs)
- MachinePaths: Paths inside a Vagrant machine-definition directory

Usage:
    from winboxctl.paths import HostPaths, MachinePaths

    config_file = HostPaths.config_file()
    overlay = MachinePaths.overlay_file(machine_dir)
"""

import os
from pathlib import Path


class HostPaths:
    """Paths on the host machine where winboxctl runs."""

    @staticmethod
    def config_dir() -> Path:
        """~/.config/winboxctl/"""
        return Path.home() / ".config" / "winboxctl"

    @staticmethod
    def config_file() -> Path:
        """~/.config/winboxctl/config.yml (or $WINBOXCTL_CONFIG)"""
        env_path = os.getenv("WINBOXCTL_CONFIG")
        if env_path:
            return Path(env_path)
        return HostPaths.config_dir() / "config.yml"

    @staticmethod
    def data_dir() -> Path:
        """~/.local/share/winboxctl/"""
        return Path.home() / ".local" / "share" / "winboxctl"

    @staticmethod
    def log_dir() -> Path:
        """~/.local/share/winboxctl/logs/"""
        return HostPaths.data_dir() / "logs"

    @staticmethod
    def default_machine_dir() -> Path:
        """Checkout of the windows-docker-machine Vagrant project."""
        return HostPaths.data_dir() / "windows-docker-machine"

    @staticmethod
    def docker_config_file() -> Path:
        """~/.docker/config.json"""
        return Path.home() / ".docker" / "config.json"


class MachinePaths:
    """Paths relative to the machine-definition directory.

    The base ``Vagrantfile`` is owned by the machine project and never
    written. winboxctl only writes the overlay next to it.
    """

    BASE_VAGRANTFILE = "Vagrantfile"
    OVERLAY_NAME = "VagrantfileOverwrites"

    @staticmethod
    def base_vagrantfile(machine_dir: Path) -> Path:
        return machine_dir / MachinePaths.BASE_VAGRANTFILE

    @staticmethod
    def overlay_file(machine_dir: Path, name: str = OVERLAY_NAME) -> Path:
        return machine_dir / name
