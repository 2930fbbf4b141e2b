# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Vagrantfile overlay generation.

The windows-docker-machine project ships an immutable base ``Vagrantfile``.
Per-invocation customisation (shared folders, provisioners, user overrides)
goes into an overlay file next to it. Vagrant is pointed at the overlay via
``VAGRANT_VAGRANTFILE``; the overlay first loads the base file, then layers
the override content and the trailer on top.

The overlay is only rewritten when its content actually changes so that a
running box is not reloaded needlessly.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from winboxctl.errors import ConfigurationError
from winboxctl.paths import MachinePaths
from winboxctl.utils.logging import get_logger

logger = get_logger(__name__)

PREAMBLE = (
    "# Generated by winboxctl. Changes are overwritten on the next run.\n"
    f'load File.join(File.dirname(__FILE__), "{MachinePaths.BASE_VAGRANTFILE}")'
)


class OverrideKind(Enum):
    DEFAULT = "default"  # not given: look for the conventional file in cwd
    FILE = "file"  # explicit path
    EMPTY = "empty"  # given but unusable, or explicitly disabled


@dataclass(frozen=True)
class Override:
    """Where the user's Vagrantfile override comes from."""

    kind: OverrideKind
    path: Optional[Path] = None

    @classmethod
    def default(cls) -> "Override":
        return cls(OverrideKind.DEFAULT)

    @classmethod
    def file(cls, path: Path) -> "Override":
        return cls(OverrideKind.FILE, Path(path))

    @classmethod
    def empty(cls) -> "Override":
        return cls(OverrideKind.EMPTY)

    @classmethod
    def from_option(cls, value: Optional[str], disabled: bool = False) -> "Override":
        """Build from the CLI ``--vagrantfile`` / ``--no-vagrantfile`` options.

        A missing option means "use the default file"; a blank value or the
        disable flag means "no override" rather than an error.
        """
        if disabled:
            return cls.empty()
        if value is None:
            return cls.default()
        if not str(value).strip():
            return cls.empty()
        return cls.file(Path(value))


@dataclass(frozen=True)
class EffectiveConfiguration:
    """The overlay text in its three parts."""

    body: str = ""
    trailer: str = ""
    preamble: str = PREAMBLE

    def render(self) -> str:
        return "\n".join([self.preamble, self.body, self.trailer])


def _read_override(path: Path, hint: str = "Check the path passed to --vagrantfile") -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Could not read Vagrantfile override {path}: {exc.strerror or exc}",
            hint=hint,
        ) from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(
            f"Vagrantfile override {path} is not UTF-8 text",
            hint=hint,
        ) from exc


def resolve(
    override: Override,
    trailer: str = "",
    cwd: Optional[Path] = None,
    default_name: str = "Vagrantfile.windows",
) -> EffectiveConfiguration:
    """Combine the override source and trailer into the overlay content.

    A missing default file means no override; one that exists but cannot
    be read is an error just like an explicit path.

    Raises:
        ConfigurationError: If an override file cannot be read
    """
    if override.kind is OverrideKind.FILE:
        body = _read_override(override.path)
        logger.debug(f"Using Vagrantfile override {override.path}")
    elif override.kind is OverrideKind.DEFAULT:
        default_file = (cwd or Path.cwd()) / default_name
        if default_file.exists():
            body = _read_override(
                default_file,
                hint=f"Fix or remove {default_name}, or pass --no-vagrantfile",
            )
            logger.debug(f"Using Vagrantfile override {default_file}")
        else:
            body = ""
    else:
        body = ""

    return EffectiveConfiguration(body=body, trailer=trailer)


class OverlayFile:
    """The materialized overlay next to the base Vagrantfile."""

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> str:
        """Current content, empty string if the file does not exist.

        Raises:
            ConfigurationError: If the overlay exists but cannot be read
        """
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            raise ConfigurationError(
                f"Could not read {self.path}: {exc.strerror or exc}",
                hint=f"Delete {self.path}; it is regenerated on the next run",
            ) from exc
        except UnicodeDecodeError as exc:
            raise ConfigurationError(
                f"{self.path} is not UTF-8 text",
                hint=f"Delete {self.path}; it is regenerated on the next run",
            ) from exc

    def materialize(self, config: EffectiveConfiguration) -> bool:
        """Write ``config`` if it differs from the file; return whether it changed."""
        content = config.render()
        if self.read() == content:
            logger.debug(f"{self.path.name} unchanged")
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {self.path}")
        return True

    def remove(self) -> bool:
        """Delete the overlay. Failures are logged, never raised."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.warning(f"Could not remove {self.path}: {exc}")
            return False
        logger.debug(f"Removed {self.path}")
        return True
