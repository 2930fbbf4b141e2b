# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Options shared by commands that bring the box up."""

from typing import Callable, Optional

import click

from winboxctl.overlay import Override


def box_options(func: Callable) -> Callable:
    """Add --keep/--cache and the Vagrantfile override options."""
    func = click.option(
        "--no-vagrantfile",
        "no_vagrantfile",
        is_flag=True,
        help="Ignore Vagrantfile.windows in the current directory",
    )(func)
    func = click.option(
        "--vagrantfile",
        "vagrantfile",
        type=click.Path(dir_okay=False),
        default=None,
        help="Vagrantfile snippet layered on top of the base box definition",
    )(func)
    func = click.option(
        "--keep",
        "--cache",
        "keep",
        is_flag=True,
        help="Keep the VM instance running afterwards",
    )(func)
    return func


def override_from_options(vagrantfile: Optional[str], no_vagrantfile: bool) -> Override:
    return Override.from_option(vagrantfile, disabled=no_vagrantfile)
