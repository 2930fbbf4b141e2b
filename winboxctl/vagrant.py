# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Vagrant box lifecycle.

Decides between starting, reloading or reusing the box and runs the
halt+destroy teardown. Box state is never stored; it is queried from
``vagrant status`` every time a decision is made.

    | state            | overlay changed | action        |
    |------------------|-----------------|---------------|
    | stopped/unknown  | -               | vagrant up    |
    | running          | no              | none          |
    | running          | yes             | vagrant reload|
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from winboxctl.errors import BoxError, ProcessError
from winboxctl.overlay import EffectiveConfiguration, OverlayFile
from winboxctl.utils.logging import get_logger
from winboxctl.utils.process import capture, run_inherit

logger = get_logger(__name__)

VAGRANT = "vagrant"


class BoxState(Enum):
    UNKNOWN = "unknown"
    STOPPED = "stopped"
    RUNNING = "running"


class LifecycleDecision(Enum):
    START = "start"
    RELOAD_CONFIG_CHANGED = "reload"
    NOOP_ALREADY_RUNNING = "noop"


def parse_status(output: str, box: str) -> BoxState:
    """Find the box's row in ``vagrant status`` output.

    Example row: ``2019-box                  running (virtualbox)``.
    A missing row means the box has not been created.
    """
    for line in output.splitlines():
        tokens = line.split()
        if tokens and tokens[0] == box:
            return BoxState.RUNNING if "running" in line else BoxState.STOPPED
    return BoxState.STOPPED


def decide(state: BoxState, changed: bool) -> LifecycleDecision:
    """Map box state and overlay diff to the bring-up action."""
    if state is not BoxState.RUNNING:
        return LifecycleDecision.START
    if changed:
        return LifecycleDecision.RELOAD_CONFIG_CHANGED
    return LifecycleDecision.NOOP_ALREADY_RUNNING


class VagrantClient:
    """Runs vagrant subcommands against one box in the machine directory."""

    def __init__(self, machine_dir: Path, box: str, overlay: OverlayFile):
        self.machine_dir = machine_dir
        self.box = box
        self.overlay = overlay

    def env(self) -> Dict[str, str]:
        """Point vagrant at the overlay while one exists."""
        if self.overlay.exists():
            return {"VAGRANT_VAGRANTFILE": self.overlay.path.name}
        return {}

    async def status(self) -> BoxState:
        """Query the box state. Failures map to UNKNOWN."""
        try:
            result = await capture(
                VAGRANT, ["status", self.box], cwd=self.machine_dir, env=self.env()
            )
        except ProcessError as exc:
            logger.debug(f"vagrant status failed: {exc}")
            return BoxState.UNKNOWN
        if not result.ok:
            logger.debug(f"vagrant status exited {result.returncode}: {result.output.strip()}")
            return BoxState.UNKNOWN
        state = parse_status(result.output, self.box)
        logger.debug(f"Box {self.box} is {state.value}")
        return state

    async def execute(self, args: Sequence[str], with_box: bool = True) -> int:
        """Run ``vagrant <args> [box]`` attached to the terminal."""
        cmd: List[str] = list(args)
        if with_box:
            cmd.append(self.box)
        return await run_inherit(VAGRANT, cmd, cwd=self.machine_dir, env=self.env())


class BoxLifecycle:
    """Brings the box up for a configuration and tears it down afterwards."""

    def __init__(self, vagrant: VagrantClient, overlay: Optional[OverlayFile] = None):
        self.vagrant = vagrant
        self.overlay = overlay or vagrant.overlay

    async def bring_up(self, config: EffectiveConfiguration) -> LifecycleDecision:
        """Materialize ``config`` and start, reload or reuse the box.

        Raises:
            BoxError: If ``vagrant up`` or ``vagrant reload`` fails
        """
        changed = self.overlay.materialize(config)
        state = await self.vagrant.status()
        decision = decide(state, changed)

        if decision is LifecycleDecision.NOOP_ALREADY_RUNNING:
            logger.info("vagrant box is already running")
            return decision

        if decision is LifecycleDecision.RELOAD_CONFIG_CHANGED:
            logger.info("🔄 vagrant configuration changed, restarting the box")
            args = ["reload"]
        else:
            logger.info("🚀 launching vagrant")
            args = ["up"]

        returncode = await self.vagrant.execute(args)
        if returncode != 0:
            raise BoxError(
                f"vagrant {args[0]} {self.vagrant.box} failed (exit {returncode})",
                hint=f"Inspect the box with: cd {self.vagrant.machine_dir} && vagrant status",
            )
        return decision

    async def teardown(self) -> bool:
        """Force-halt and destroy the box, then remove the overlay.

        Best effort: a failing halt does not stop the destroy, and the
        overlay is removed whatever happened before. Returns True if the
        destroy succeeded.
        """
        logger.info("🧹 cleaning up")

        try:
            halt_code = await self.vagrant.execute(["halt", "-f"])
            if halt_code != 0:
                logger.warning(f"vagrant halt exited {halt_code}, destroying anyway")
        except ProcessError as exc:
            logger.warning(f"vagrant halt failed: {exc}")

        destroyed = False
        try:
            destroy_code = await self.vagrant.execute(["destroy", "-f"])
            destroyed = destroy_code == 0
            if not destroyed:
                logger.error(f"vagrant destroy exited {destroy_code}")
        except ProcessError as exc:
            logger.error("vagrant destroy failed", exc=exc)

        self.overlay.remove()
        return destroyed
