# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pytest fixtures for winboxctl tests.

docker, vagrant and VBoxManage are never run. The ``fake_processes``
fixture replaces the subprocess seam (``winboxctl.utils.process``) in every
module that calls it and records what would have been executed.
"""

import os
import tempfile
from pathlib import Path

import pytest

# Keep test runs out of the user's log directory
os.environ.setdefault(
    "WINBOXCTL_LOG_FILE", str(Path(tempfile.gettempdir()) / "winboxctl-tests.log")
)

from winboxctl.errors import ProcessError  # noqa: E402
from winboxctl.host_config import HostConfig, reset_config  # noqa: E402
from winboxctl.utils.process import CommandResult  # noqa: E402

BOX = "2019-box"


class FakeProcesses:
    """Records commands and returns canned results.

    Attributes:
        calls: (program, args, env) for every command, in order
        versions: program -> ``--version`` output (None = not installed)
        status_output: what ``vagrant status`` prints
        exit_codes: (program, subcommand) -> exit code for attached commands
        missing: programs that raise ProcessError when started
    """

    def __init__(self):
        self.calls = []
        self.versions = {
            "docker": "Docker version 19.03.11, build 42e35e6",
            "vagrant": "Vagrant 2.2.9",
            "VBoxManage": "6.1.8r137981",
        }
        self.status_output = f"Current machine states:\n\n{BOX}    not created (virtualbox)\n"
        self.status_returncode = 0
        self.exit_codes = {}
        self.missing = set()

    def set_running(self, running: bool = True) -> None:
        state = "running (virtualbox)" if running else "poweroff (virtualbox)"
        self.status_output = f"Current machine states:\n\n{BOX}    {state}\n"

    async def capture(self, program, args, cwd=None, env=None):
        args = list(args)
        self.calls.append((program, args, dict(env or {})))
        if program in self.missing:
            raise ProcessError(program, f"Command not found: {program}")
        if args == ["--version"]:
            output = self.versions.get(program)
            if output is None:
                raise ProcessError(program, f"Command not found: {program}")
            return CommandResult(returncode=0, output=output)
        if program == "vagrant" and args and args[0] == "status":
            return CommandResult(returncode=self.status_returncode, output=self.status_output)
        return CommandResult(returncode=0, output="")

    async def run_inherit(self, program, args, cwd=None, env=None):
        args = list(args)
        self.calls.append((program, args, dict(env or {})))
        if program in self.missing:
            raise ProcessError(program, f"Command not found: {program}")
        return self.exit_codes.get((program, args[0] if args else ""), 0)

    def commands(self, program=None):
        """Argument lists of recorded commands, optionally for one program."""
        return [args for prog, args, _ in self.calls if program is None or prog == program]

    def vagrant_actions(self):
        """Subcommands of attached vagrant calls (up, reload, halt, destroy, ...)."""
        return [
            args[0]
            for prog, args, _ in self.calls
            if prog == "vagrant" and args and args[0] not in ("status", "--version")
        ]


@pytest.fixture
def fake_processes(monkeypatch):
    """Replace every subprocess call with a FakeProcesses recorder."""
    fake = FakeProcesses()
    monkeypatch.setattr("winboxctl.versions.capture", fake.capture)
    monkeypatch.setattr("winboxctl.vagrant.capture", fake.capture)
    monkeypatch.setattr("winboxctl.vagrant.run_inherit", fake.run_inherit)
    monkeypatch.setattr("winboxctl.docker.run_inherit", fake.run_inherit)
    return fake


@pytest.fixture
def machine_dir(tmp_path):
    """A machine-definition directory with a base Vagrantfile."""
    path = tmp_path / "windows-docker-machine"
    path.mkdir()
    (path / "Vagrantfile").write_text('Vagrant.configure("2") do |config|\nend\n')
    return path


@pytest.fixture
def project_dir(tmp_path):
    """The directory winboxctl is invoked from."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def host_config(tmp_path, machine_dir, monkeypatch):
    """HostConfig pointing at the temporary machine directory."""
    monkeypatch.setenv("WINBOXCTL_MACHINE_DIR", str(machine_dir))
    monkeypatch.delenv("WINBOXCTL_BOX", raising=False)
    monkeypatch.setenv("WINBOXCTL_CONFIG", str(tmp_path / "config.yml"))
    reset_config()
    yield HostConfig()
    reset_config()
