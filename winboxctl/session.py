# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""One winboxctl invocation against the box.

Stages always run in this order:

    version gate -> overlay -> bring-up -> docker context -> delegate -> teardown

Teardown is skipped when the caller keeps the instance.
"""

from pathlib import Path
from typing import Optional, Sequence

from winboxctl.compose import compose_trailer
from winboxctl.docker import DockerClient
from winboxctl.errors import BoxError, ConfigurationError
from winboxctl.host_config import HostConfig, get_config
from winboxctl.overlay import OverlayFile, Override, resolve
from winboxctl.paths import MachinePaths
from winboxctl.vagrant import BoxLifecycle, BoxState, LifecycleDecision, VagrantClient
from winboxctl.versions import VersionGate
from winboxctl.utils.logging import get_logger

logger = get_logger(__name__)


class BoxSession:
    """Sequences the lifecycle stages for a single command."""

    def __init__(
        self,
        config: Optional[HostConfig] = None,
        gate: Optional[VersionGate] = None,
        cwd: Optional[Path] = None,
    ):
        self.config = config or get_config()
        self.cwd = cwd or Path.cwd()
        versions = self.config.model.versions
        self.gate = gate or VersionGate(
            minimums={"docker": tuple(versions.docker), "vagrant": tuple(versions.vagrant)}
        )
        self.overlay = OverlayFile(self.config.overlay_path)
        self.vagrant = VagrantClient(self.config.machine_dir, self.config.box_name, self.overlay)
        self.lifecycle = BoxLifecycle(self.vagrant, self.overlay)
        self.docker = DockerClient(self.config.docker_context)

    def ensure_machine_dir(self) -> None:
        """Fail early if the machine directory has no base Vagrantfile."""
        machine_dir = self.config.machine_dir
        if not MachinePaths.base_vagrantfile(machine_dir).is_file():
            raise ConfigurationError(
                f"No {MachinePaths.BASE_VAGRANTFILE} found in {machine_dir}",
                hint=(
                    "git clone https://github.com/StefanScherer/windows-docker-machine "
                    f"{machine_dir}  (or set WINBOXCTL_MACHINE_DIR)"
                ),
            )

    async def bring_up(self, override: Override, trailer: str = "") -> LifecycleDecision:
        await self.gate.assert_prerequisites()
        self.ensure_machine_dir()
        effective = resolve(
            override,
            trailer,
            cwd=self.cwd,
            default_name=self.config.default_override_name,
        )
        return await self.lifecycle.bring_up(effective)

    async def run_docker(self, args: Sequence[str], override: Override, keep: bool = False) -> int:
        """Bring the box up, run ``docker run args`` in it, tear down.

        Returns the container's exit status.
        """
        await self.bring_up(override)
        try:
            return await self.docker.run(args)
        finally:
            if not keep:
                await self.lifecycle.teardown()

    async def powershell(self, override: Override, keep: bool = False) -> int:
        """Interactive PowerShell in a Windows container with cwd mounted."""
        await self.bring_up(override)
        try:
            return await self.docker.powershell(
                self.cwd, self.config.get("docker", "powershell_image")
            )
        finally:
            if not keep:
                await self.lifecycle.teardown()

    async def compose(self, args: Sequence[str], override: Override, keep: bool = False) -> int:
        """Run docker-compose inside the box via a provisioner.

        ``vagrant up`` and ``reload`` run the provisioner themselves; a box
        that is reused as-is is provisioned explicitly.

        Raises:
            BoxError: If ``vagrant provision`` fails
        """
        trailer = compose_trailer(args, self.cwd, self.config.get("docker", "compose_version"))
        decision = await self.bring_up(override, trailer)
        try:
            if decision is LifecycleDecision.NOOP_ALREADY_RUNNING:
                returncode = await self.vagrant.execute(["provision"])
                if returncode != 0:
                    raise BoxError(
                        f"vagrant provision {self.vagrant.box} failed (exit {returncode})",
                        hint="Check the docker-compose output above",
                    )
            return 0
        finally:
            if not keep:
                await self.lifecycle.teardown()

    async def vagrant_command(self, args: Sequence[str]) -> int:
        """Run a raw vagrant subcommand against the box (halt, destroy)."""
        await self.gate.assert_vagrant()
        self.ensure_machine_dir()
        returncode = await self.vagrant.execute(args)
        if returncode == 0 and args and args[0] == "destroy":
            self.overlay.remove()
        return returncode

    async def status(self) -> BoxState:
        self.ensure_machine_dir()
        return await self.vagrant.status()
