# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Async subprocess helpers.

Every external program winboxctl talks to (docker, vagrant, VBoxManage)
goes through these two functions, which makes them the single seam tests
replace.
"""

import asyncio
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from winboxctl.errors import ProcessError
from winboxctl.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of a captured command."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _merged_env(env: Optional[Mapping[str, str]]) -> Optional[dict]:
    if not env:
        return None
    return {**os.environ, **env}


async def capture(
    program: str,
    args: Sequence[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> CommandResult:
    """Run a command to completion and capture stdout+stderr as text.

    Raises:
        ProcessError: If the program cannot be started (e.g. not installed)
    """
    cmd = [program, *args]
    logger.debug(f"capture: {shlex.join(cmd)} (cwd={cwd})")
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd) if cwd else None,
            env=_merged_env(env),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as exc:
        raise ProcessError(program, f"Command not found: {program}") from exc
    except OSError as exc:
        raise ProcessError(program, f"Could not run '{shlex.join(cmd)}': {exc}") from exc

    stdout, _ = await proc.communicate()
    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    logger.debug(f"capture: {program} exited {proc.returncode}")
    return CommandResult(returncode=proc.returncode, output=output)


async def run_inherit(
    program: str,
    args: Sequence[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """Run a command attached to the caller's terminal and return its exit code.

    Raises:
        ProcessError: If the program cannot be started (e.g. not installed)
    """
    cmd = [program, *args]
    logger.debug(f"run: {shlex.join(cmd)} (cwd={cwd})")
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd) if cwd else None,
            env=_merged_env(env),
        )
    except FileNotFoundError as exc:
        raise ProcessError(program, f"Command not found: {program}") from exc
    except OSError as exc:
        raise ProcessError(program, f"Could not run '{shlex.join(cmd)}': {exc}") from exc

    returncode = await proc.wait()
    logger.debug(f"run: {program} exited {returncode}")
    return returncode
