# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for tool version detection and gating."""

import asyncio

import pytest

from winboxctl.errors import PrerequisiteError
from winboxctl.utils.process import CommandResult
from winboxctl.versions import (
    DOCKER,
    VAGRANT,
    VIRTUALBOX,
    Lazy,
    ToolVersion,
    VersionGate,
    meets_minimum,
    parse_version,
)


class TestParseVersion:
    """Tests for parse_version."""

    def test_docker_output(self):
        assert parse_version("Docker version 19.3.11, build abcd") == ToolVersion(19, 3, 11)

    def test_docker_zero_padded_minor(self):
        assert parse_version("Docker version 19.03.11, build 42e35e6") == (19, 3, 11)

    def test_vagrant_output(self):
        assert parse_version("vagrant 2.2.9") == (2, 2, 9)

    def test_virtualbox_output(self):
        assert parse_version("6.1.8r137981") == (6, 1, 8)

    def test_first_match_wins(self):
        assert parse_version("tool 1.2.3 (api 4.5.6)") == (1, 2, 3)

    def test_no_match_is_not_installed(self):
        assert parse_version("command not found") is None
        assert parse_version("version 19.3") is None
        assert parse_version("") is None

    def test_str(self):
        assert str(ToolVersion(19, 3, 11)) == "19.3.11"


class TestMeetsMinimum:
    """Tests for the minimum-version policy."""

    def test_same_major_equal_minor(self):
        assert meets_minimum(ToolVersion(19, 3, 0), 19, 3)

    def test_same_major_lower_minor(self):
        assert not meets_minimum(ToolVersion(19, 2, 9), 19, 3)

    def test_higher_major(self):
        assert meets_minimum(ToolVersion(20, 0, 0), 19, 3)

    def test_lower_major(self):
        assert not meets_minimum(ToolVersion(1, 9, 9), 2, 2)

    def test_not_installed(self):
        assert not meets_minimum(None, 2, 2)


class TestLazy:
    """Tests for the single-shot value holder."""

    def test_factory_runs_once(self):
        calls = []

        async def factory():
            calls.append(1)
            await asyncio.sleep(0)
            return "value"

        lazy = Lazy(factory)

        async def main():
            return await asyncio.gather(lazy.get(), lazy.get(), lazy.get())

        assert asyncio.run(main()) == ["value", "value", "value"]
        assert asyncio.run(lazy.get()) == "value"
        assert calls == [1]


def _runner(outputs, calls):
    async def runner(program, args):
        calls.append(program)
        output = outputs.get(program)
        if output is None:
            from winboxctl.errors import ProcessError

            raise ProcessError(program, f"Command not found: {program}")
        return CommandResult(returncode=0, output=output)

    return runner


class TestVersionGate:
    """Tests for VersionGate."""

    def test_check_tool_is_cached_per_instance(self):
        calls = []
        outputs = {"docker": "Docker version 19.03.11, build 42e35e6"}
        gate = VersionGate(runner=_runner(outputs, calls))

        assert asyncio.run(gate.check_tool(DOCKER)) == (19, 3, 11)
        assert asyncio.run(gate.check_tool(DOCKER)) == (19, 3, 11)
        assert calls == ["docker"]

        other = VersionGate(runner=_runner(outputs, calls))
        asyncio.run(other.check_tool(DOCKER))
        assert calls == ["docker", "docker"]

    def test_missing_binary_is_not_installed(self):
        gate = VersionGate(runner=_runner({}, []))
        assert asyncio.run(gate.check_tool(VAGRANT)) is None

    def test_unparseable_output_is_not_installed(self):
        gate = VersionGate(runner=_runner({"vagrant": "something odd"}, []))
        assert asyncio.run(gate.check_tool(VAGRANT)) is None

    def test_prerequisites_pass(self, fake_processes, capsys):
        gate = VersionGate()
        docker_version, vagrant_version = asyncio.run(gate.assert_prerequisites())

        assert docker_version == (19, 3, 11)
        assert vagrant_version == (2, 2, 9)
        out = capsys.readouterr().out
        assert "Docker found: (19.3.11)" in out
        assert "Vagrant found: (2.2.9)" in out
        assert "VirtualBox found: (6.1.8)" in out

    def test_docker_missing(self, fake_processes):
        fake_processes.versions["docker"] = None
        gate = VersionGate()

        with pytest.raises(PrerequisiteError) as excinfo:
            asyncio.run(gate.assert_prerequisites())
        assert "docker cli was not found" in str(excinfo.value)
        assert "https://docs.docker.com/get-docker/" in excinfo.value.hint

    def test_docker_too_old(self, fake_processes):
        fake_processes.versions["docker"] = "Docker version 18.09.2, build 6247962"
        gate = VersionGate()

        with pytest.raises(PrerequisiteError) as excinfo:
            asyncio.run(gate.assert_prerequisites())
        assert "too old (18.9.2)" in str(excinfo.value)

    def test_vagrant_too_old(self, fake_processes):
        fake_processes.versions["vagrant"] = "Vagrant 2.1.5"
        gate = VersionGate()

        with pytest.raises(PrerequisiteError) as excinfo:
            asyncio.run(gate.assert_prerequisites())
        assert "vagrant" in str(excinfo.value)
        assert "https://www.vagrantup.com/downloads" in excinfo.value.hint

    def test_both_tools_queried_before_failing(self, fake_processes):
        fake_processes.versions["docker"] = None
        gate = VersionGate()

        with pytest.raises(PrerequisiteError):
            asyncio.run(gate.assert_prerequisites())
        programs = [prog for prog, _, _ in fake_processes.calls]
        assert "docker" in programs
        assert "vagrant" in programs

    def test_virtualbox_is_optional(self, fake_processes, capsys):
        fake_processes.versions["VBoxManage"] = None
        gate = VersionGate()

        asyncio.run(gate.assert_vagrant())
        assert "VirtualBox" not in capsys.readouterr().out
        assert asyncio.run(gate.check_tool(VIRTUALBOX)) is None

    def test_custom_minimums(self, fake_processes):
        gate = VersionGate(minimums={"vagrant": (2, 3)})

        with pytest.raises(PrerequisiteError):
            asyncio.run(gate.assert_vagrant())

    def test_broken_docker_context(self):
        output = (
            "error during connect: parse tcp://2019-box:2376: "
            "invalid character \" \" in host name"
        )
        gate = VersionGate(runner=_runner({"docker": output}, []))

        with pytest.raises(PrerequisiteError) as excinfo:
            asyncio.run(gate.assert_docker())
        assert "docker context" in str(excinfo.value)
        assert "currentContext" in excinfo.value.hint
