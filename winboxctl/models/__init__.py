# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pydantic models for winboxctl configuration."""

from winboxctl.models.host_config import (
    DockerSettings,
    HostConfigModel,
    MachineSettings,
    VersionSettings,
)

__all__ = [
    "DockerSettings",
    "HostConfigModel",
    "MachineSettings",
    "VersionSettings",
]
