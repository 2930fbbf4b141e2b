# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for Vagrantfile overlay resolution and materialization."""

from pathlib import Path

import pytest

from winboxctl.errors import ConfigurationError
from winboxctl.overlay import (
    PREAMBLE,
    EffectiveConfiguration,
    OverlayFile,
    Override,
    OverrideKind,
    resolve,
)


class TestOverride:
    """Tests for building Override from CLI options."""

    def test_missing_option_uses_default(self):
        assert Override.from_option(None).kind is OverrideKind.DEFAULT

    def test_path_option(self):
        override = Override.from_option("custom.rb")
        assert override.kind is OverrideKind.FILE
        assert override.path == Path("custom.rb")

    def test_blank_option_is_empty(self):
        assert Override.from_option("").kind is OverrideKind.EMPTY
        assert Override.from_option("   ").kind is OverrideKind.EMPTY

    def test_disabled_wins(self):
        assert Override.from_option("custom.rb", disabled=True).kind is OverrideKind.EMPTY


class TestEffectiveConfiguration:
    """Tests for the overlay text builder."""

    def test_render_layout(self):
        config = EffectiveConfiguration(body="BODY", trailer="TRAILER")
        assert config.render() == f"{PREAMBLE}\nBODY\nTRAILER"

    def test_preamble_loads_base_vagrantfile(self):
        lines = PREAMBLE.splitlines()
        assert len(lines) == 2
        assert lines[1] == 'load File.join(File.dirname(__FILE__), "Vagrantfile")'

    def test_empty_parts(self):
        assert EffectiveConfiguration().render() == f"{PREAMBLE}\n\n"


class TestResolve:
    """Tests for resolve()."""

    def test_explicit_file(self, tmp_path):
        override = tmp_path / "custom.rb"
        override.write_text("config.vm.memory = 4096\n")

        config = resolve(Override.file(override), "TRAILER", cwd=tmp_path)
        assert config.body == "config.vm.memory = 4096\n"
        assert config.trailer == "TRAILER"

    def test_explicit_file_unreadable_is_fatal(self, tmp_path):
        with pytest.raises(ConfigurationError) as excinfo:
            resolve(Override.file(tmp_path / "missing.rb"), cwd=tmp_path)
        assert "missing.rb" in str(excinfo.value)

    def test_default_file_in_cwd(self, tmp_path):
        (tmp_path / "Vagrantfile.windows").write_text("DEFAULT")
        assert resolve(Override.default(), cwd=tmp_path).body == "DEFAULT"

    def test_default_file_absent(self, tmp_path):
        assert resolve(Override.default(), cwd=tmp_path).body == ""

    def test_default_file_custom_name(self, tmp_path):
        (tmp_path / "Boxfile").write_text("CUSTOM")
        config = resolve(Override.default(), cwd=tmp_path, default_name="Boxfile")
        assert config.body == "CUSTOM"

    def test_default_file_unreadable_is_fatal(self, tmp_path):
        # A directory where the default file is expected cannot be read
        (tmp_path / "Vagrantfile.windows").mkdir()

        with pytest.raises(ConfigurationError) as excinfo:
            resolve(Override.default(), cwd=tmp_path)
        assert "--no-vagrantfile" in excinfo.value.hint

    def test_default_file_not_utf8_is_fatal(self, tmp_path):
        (tmp_path / "Vagrantfile.windows").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(ConfigurationError) as excinfo:
            resolve(Override.default(), cwd=tmp_path)
        assert "UTF-8" in str(excinfo.value)

    def test_explicit_file_not_utf8_is_fatal(self, tmp_path):
        override = tmp_path / "custom.rb"
        override.write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(ConfigurationError):
            resolve(Override.file(override), cwd=tmp_path)

    def test_empty_ignores_default_file(self, tmp_path):
        (tmp_path / "Vagrantfile.windows").write_text("DEFAULT")
        assert resolve(Override.empty(), "T", cwd=tmp_path).body == ""

    def test_deterministic(self, tmp_path):
        override = tmp_path / "custom.rb"
        override.write_text("X")
        first = resolve(Override.file(override), "T", cwd=tmp_path).render()
        second = resolve(Override.file(override), "T", cwd=tmp_path).render()
        assert first == second


class TestOverlayFile:
    """Tests for OverlayFile."""

    def test_materialize_is_idempotent(self, tmp_path):
        overlay = OverlayFile(tmp_path / "VagrantfileOverwrites")
        config = EffectiveConfiguration(body="A", trailer="B")

        assert overlay.materialize(config) is True
        assert overlay.materialize(config) is False
        assert overlay.path.read_text() == config.render()

    def test_materialize_detects_change(self, tmp_path):
        overlay = OverlayFile(tmp_path / "VagrantfileOverwrites")
        overlay.materialize(EffectiveConfiguration(body="A"))

        assert overlay.materialize(EffectiveConfiguration(body="B")) is True
        assert overlay.read() == EffectiveConfiguration(body="B").render()

    def test_unchanged_does_not_write(self, tmp_path):
        overlay = OverlayFile(tmp_path / "VagrantfileOverwrites")
        config = EffectiveConfiguration(body="A")
        overlay.materialize(config)
        mtime = overlay.path.stat().st_mtime_ns

        assert overlay.materialize(config) is False
        assert overlay.path.stat().st_mtime_ns == mtime

    def test_read_missing(self, tmp_path):
        assert OverlayFile(tmp_path / "nope").read() == ""

    def test_remove(self, tmp_path):
        overlay = OverlayFile(tmp_path / "VagrantfileOverwrites")
        overlay.materialize(EffectiveConfiguration())

        assert overlay.remove() is True
        assert not overlay.exists()
        assert overlay.remove() is True

    def test_remove_failure_is_swallowed(self, tmp_path):
        # A directory in place of the file makes unlink fail
        path = tmp_path / "VagrantfileOverwrites"
        path.mkdir()
        assert OverlayFile(path).remove() is False
        assert path.exists()

    def test_read_not_utf8_is_configuration_error(self, tmp_path):
        path = tmp_path / "VagrantfileOverwrites"
        path.write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(ConfigurationError) as excinfo:
            OverlayFile(path).read()
        assert "regenerated" in excinfo.value.hint
