# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Exception types raised by winboxctl.

These bubble up to ``handle_errors`` in the CLI, which renders them as
panels and exits with code 1.
"""

from typing import Optional


class WinboxError(Exception):
    """Base class for user-facing winboxctl errors."""

    title = "Error"

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class PrerequisiteError(WinboxError):
    """A required tool is missing or too old."""

    title = "Missing Prerequisite"


class ConfigurationError(WinboxError):
    """A caller-specified Vagrantfile override could not be read."""

    title = "Configuration Error"


class BoxError(WinboxError):
    """The box could not be brought up or targeted."""

    title = "Box Error"


class ProcessError(WinboxError):
    """An external program could not be started."""

    title = "Process Error"

    def __init__(self, program: str, message: str, hint: Optional[str] = None):
        super().__init__(message, hint)
        self.program = program
