# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""docker client calls against the box.

The box exposes its docker engine under a named docker context. The context
is selected again before every delegated command so docker never talks to
the local engine by accident.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Set

from winboxctl.errors import BoxError
from winboxctl.utils.logging import get_logger
from winboxctl.utils.process import run_inherit

logger = get_logger(__name__)

DOCKER = "docker"
DEFAULT_CONTEXT = "2019-box"
DEFAULT_POWERSHELL_IMAGE = "mcr.microsoft.com/windows/servercore:1809"

# Options of ``docker run`` whose value is the following argument
VALUE_OPTIONS = frozenset(
    {
        "-a", "-e", "-h", "-l", "-m", "-p", "-u", "-v", "-w",
        "--attach", "--cpus", "--entrypoint", "--env", "--env-file",
        "--hostname", "--isolation", "--label", "--memory", "--mount",
        "--name", "--network", "--platform", "--publish", "--user",
        "--volume", "--workdir",
    }
)
VALUE_SHORT_FLAGS = frozenset(opt[1] for opt in VALUE_OPTIONS if len(opt) == 2)


def _attach_flags(args: Sequence[str]) -> Set[str]:
    """Which of ``i`` (interactive) and ``t`` (tty) the caller already set.

    Only the options before the image are inspected; everything after it
    belongs to the container command.
    """
    found: Set[str] = set()
    expect_value = False
    for arg in args:
        if expect_value:
            expect_value = False
            continue
        if arg == "--":
            break
        if arg.startswith("--"):
            name = arg.split("=", 1)[0]
            if name == "--interactive":
                found.add("i")
            elif name == "--tty":
                found.add("t")
            elif name in VALUE_OPTIONS and "=" not in arg:
                expect_value = True
        elif arg.startswith("-") and len(arg) > 1:
            letters = arg[1:]
            for pos, letter in enumerate(letters):
                if letter in ("i", "t"):
                    found.add(letter)
                elif letter in VALUE_SHORT_FLAGS:
                    # the rest of the cluster, or the next argument, is the value
                    expect_value = pos == len(letters) - 1
                    break
        else:
            break
    return found


def interactive_run_args(args: Sequence[str]) -> List[str]:
    """Build ``run`` arguments that always attach stdin and a TTY.

    ``-i`` and ``-t`` are only added when the caller has not passed them.
    """
    present = _attach_flags(args)
    missing = "".join(flag for flag in ("i", "t") if flag not in present)
    forced = [f"-{missing}"] if missing else []
    return ["run", *forced, *args]


def powershell_run_args(cwd: Path, image: str = DEFAULT_POWERSHELL_IMAGE) -> List[str]:
    """``docker run`` arguments for an interactive PowerShell with cwd mounted."""
    return ["-v", f"C:{cwd}:C:/cwd", image, "powershell"]


class DockerClient:
    """Context switching and delegated ``docker run``."""

    def __init__(self, context: str = DEFAULT_CONTEXT):
        self.context = context

    async def use_context(self, context: Optional[str] = None) -> int:
        """Select the box's docker context. Re-run on every invocation."""
        name = context or self.context
        logger.debug(f"Switching docker context to {name}")
        returncode = await run_inherit(DOCKER, ["context", "use", name])
        if returncode != 0:
            logger.debug(f"docker context use {name} exited {returncode}")
        return returncode

    async def run(self, args: Sequence[str]) -> int:
        """Switch context and run a container attached to the terminal.

        Returns the container's exit status.

        Raises:
            BoxError: If the box's context cannot be selected; nothing is
                run against the local engine in that case
        """
        returncode = await self.use_context()
        if returncode != 0:
            raise BoxError(
                f"Could not switch docker to context {self.context} (exit {returncode})",
                hint="Check that the box created the context: docker context ls",
            )
        return await run_inherit(DOCKER, interactive_run_args(args))

    async def powershell(self, cwd: Path, image: str = DEFAULT_POWERSHELL_IMAGE) -> int:
        return await self.run(powershell_run_args(cwd, image))
