# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tool version detection and minimum-version gating.

docker and vagrant must be installed in a recent enough version before any
box is touched; VirtualBox is only reported. Each tool is queried at most
once per ``VersionGate`` instance.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, Mapping, NamedTuple, Optional, Tuple, TypeVar

from winboxctl.errors import PrerequisiteError, ProcessError
from winboxctl.paths import HostPaths
from winboxctl.utils.logging import get_logger
from winboxctl.utils.process import CommandResult, capture

logger = get_logger(__name__)

T = TypeVar("T")

# First x.y.z in the output, e.g. "Docker version 19.03.11, build 42e35e6"
VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")

# docker prints this when ~/.docker/config.json has a broken currentContext
BROKEN_CONTEXT_PATTERN = re.compile(r"invalid character.+in host name")


class ToolVersion(NamedTuple):
    """Semantic version of an installed tool."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class Tool:
    """An external program whose version is checked."""

    key: str
    label: str
    program: str
    version_args: Tuple[str, ...]
    download_url: str


DOCKER = Tool(
    key="docker",
    label="docker",
    program="docker",
    version_args=("--version",),
    download_url="https://docs.docker.com/get-docker/",
)
VAGRANT = Tool(
    key="vagrant",
    label="vagrant",
    program="vagrant",
    version_args=("--version",),
    download_url="https://www.vagrantup.com/downloads",
)
VIRTUALBOX = Tool(
    key="virtualbox",
    label="VirtualBox",
    program="VBoxManage",
    version_args=("--version",),
    download_url="https://www.virtualbox.org/wiki/Downloads",
)

DEFAULT_MINIMUMS: Dict[str, Tuple[int, int]] = {
    DOCKER.key: (19, 3),  # docker context
    VAGRANT.key: (2, 2),  # VAGRANT_VAGRANTFILE overlays
}

Runner = Callable[[str, Tuple[str, ...]], Awaitable[CommandResult]]


def parse_version(output: str) -> Optional[ToolVersion]:
    """Extract the first ``major.minor.patch`` from free-form output."""
    match = VERSION_PATTERN.search(output or "")
    if not match:
        return None
    return ToolVersion(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def meets_minimum(version: Optional[ToolVersion], min_major: int, min_minor: int) -> bool:
    """Return True if ``version`` is at least ``min_major.min_minor``."""
    if version is None:
        return False
    return (version.major == min_major and version.minor >= min_minor) or version.major > min_major


class Lazy(Generic[T]):
    """Single-shot lazily computed value.

    The factory runs on the first ``get()``; concurrent callers await the
    same task and later callers get the stored result (or exception).
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._task: Optional["asyncio.Future[T]"] = None

    async def get(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._factory())
        return await self._task


async def _default_runner(program: str, args: Tuple[str, ...]) -> CommandResult:
    return await capture(program, args)


class VersionGate:
    """Queries installed tool versions and enforces minimums.

    Status lines go to stdout. Failures raise PrerequisiteError carrying
    the remediation hint; the CLI turns that into exit code 1.
    """

    def __init__(
        self,
        minimums: Optional[Mapping[str, Tuple[int, int]]] = None,
        runner: Optional[Runner] = None,
    ):
        self.minimums = dict(DEFAULT_MINIMUMS)
        if minimums:
            self.minimums.update(minimums)
        self._runner = runner or _default_runner
        self._cache: Dict[str, Lazy[Optional[ToolVersion]]] = {}

    async def check_tool(self, tool: Tool) -> Optional[ToolVersion]:
        """Return the installed version of ``tool`` or None if not installed."""
        if tool.key not in self._cache:
            self._cache[tool.key] = Lazy(lambda: self._query(tool))
        return await self._cache[tool.key].get()

    async def _query(self, tool: Tool) -> Optional[ToolVersion]:
        try:
            result = await self._runner(tool.program, tool.version_args)
        except ProcessError as exc:
            logger.debug(f"{tool.program} not available: {exc}")
            return None

        if tool is DOCKER and BROKEN_CONTEXT_PATTERN.search(result.output):
            logger.debug(f"docker --version output: {result.output.strip()}")
            raise PrerequisiteError(
                "Error in docker context configuration.",
                hint=(
                    f'Please remove "currentContext" from {HostPaths.docker_config_file()} '
                    "manually. See also "
                    "https://github.com/StefanScherer/windows-docker-machine/issues/67"
                ),
            )

        version = parse_version(result.output)
        if version is None:
            logger.debug(f"No version found in {tool.program} output: {result.output.strip()!r}")
        return version

    async def _assert_minimum(self, tool: Tool) -> ToolVersion:
        version = await self.check_tool(tool)
        hint = f"Please download the latest {tool.label} version from {tool.download_url}"
        if version is None:
            raise PrerequisiteError(f"{tool.label} cli was not found", hint=hint)

        min_major, min_minor = self.minimums[tool.key]
        if not meets_minimum(version, min_major, min_minor):
            raise PrerequisiteError(
                f"your {tool.label} version is too old ({version}), "
                f"{min_major}.{min_minor} or newer is required",
                hint=hint,
            )

        logger.success(f"{tool.label.capitalize()} found: ({version})")
        return version

    async def assert_docker(self) -> ToolVersion:
        return await self._assert_minimum(DOCKER)

    async def assert_vagrant(self) -> ToolVersion:
        version = await self._assert_minimum(VAGRANT)
        await self.report_virtualbox()
        return version

    async def report_virtualbox(self) -> Optional[ToolVersion]:
        """Print the VirtualBox version if installed. Never fails."""
        version = await self.check_tool(VIRTUALBOX)
        if version is not None:
            logger.success(f"VirtualBox found: ({version})")
        else:
            logger.debug("VirtualBox not found")
        return version

    async def assert_prerequisites(self) -> Tuple[ToolVersion, ToolVersion]:
        """Gate docker and vagrant; both are queried concurrently first."""
        await asyncio.gather(self.check_tool(DOCKER), self.check_tool(VAGRANT))
        docker_version = await self.assert_docker()
        vagrant_version = await self.assert_vagrant()
        return docker_version, vagrant_version
