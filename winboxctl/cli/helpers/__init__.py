# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared helpers for the winboxctl CLI.

- utils.py: error handling decorator and error panels
- options.py: option decorators shared by the box commands

All functions are re-exported here for convenience.
"""

from winboxctl.utils.logging import console, err_console

from winboxctl.cli.helpers.utils import (
    handle_errors,
    run_async,
    show_error_panel,
)

from winboxctl.cli.helpers.options import (
    box_options,
    override_from_options,
)

__all__ = [
    "console",
    "err_console",
    # Utilities
    "handle_errors",
    "run_async",
    "show_error_panel",
    # Options
    "box_options",
    "override_from_options",
]
