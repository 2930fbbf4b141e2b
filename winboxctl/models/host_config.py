# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pydantic models for host configuration (~/.config/winboxctl/config.yml)."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MachineSettings(BaseModel):
    """Vagrant machine-definition settings."""

    model_config = ConfigDict(extra="ignore")

    dir: Optional[str] = None  # None = HostPaths.default_machine_dir()
    box: str = "2019-box"
    overlay_name: str = "VagrantfileOverwrites"
    default_override_name: str = "Vagrantfile.windows"

    @field_validator("box", "overlay_name", "default_override_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class DockerSettings(BaseModel):
    """Docker client settings for talking to the box."""

    model_config = ConfigDict(extra="ignore")

    context: str = "2019-box"
    powershell_image: str = "mcr.microsoft.com/windows/servercore:1809"
    compose_version: str = "1.26.0"


class VersionSettings(BaseModel):
    """Minimum (major, minor) versions of the gated tools."""

    model_config = ConfigDict(extra="ignore")

    docker: Tuple[int, int] = (19, 3)
    vagrant: Tuple[int, int] = (2, 2)


class HostConfigModel(BaseModel):
    """Root host configuration model."""

    model_config = ConfigDict(extra="ignore")

    machine: MachineSettings = Field(default_factory=MachineSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)
    versions: VersionSettings = Field(default_factory=VersionSettings)
