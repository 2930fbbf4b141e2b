# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Commands that run workloads inside the box.

Each command brings the box up (start, reload or reuse), runs its workload
and destroys the box again unless --keep is given.

Examples:
    winboxctl run mcr.microsoft.com/windows/nanoserver:1809 cmd /c ver
    winboxctl run --keep -p 8080:80 mcr.microsoft.com/windows/servercore/iis
    winboxctl powershell
    winboxctl compose up
"""

import sys
from typing import Optional

import click

from winboxctl.cli import cli
from winboxctl.cli.helpers import (
    box_options,
    handle_errors,
    override_from_options,
    run_async,
)
from winboxctl.session import BoxSession

PASSTHROUGH_SETTINGS = {
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
}


@cli.command("run", context_settings=PASSTHROUGH_SETTINGS)
@box_options
@click.argument("docker_args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
def run_command(keep: bool, vagrantfile: Optional[str], no_vagrantfile: bool, docker_args: tuple):
    """Run a docker image inside the Windows box.

    DOCKER_ARGS are passed to ``docker run`` unchanged; the container
    always runs attached (-it).

    Example:

        winboxctl run mcr.microsoft.com/windows/nanoserver:1809 cmd /c ver
    """
    if not docker_args:
        ctx = click.get_current_context()
        click.echo(ctx.get_help())
        sys.exit(1)

    session = BoxSession()
    override = override_from_options(vagrantfile, no_vagrantfile)
    exit_code = run_async(session.run_docker(list(docker_args), override, keep=keep))
    sys.exit(exit_code)


@cli.command("powershell")
@box_options
@handle_errors
def powershell_command(keep: bool, vagrantfile: Optional[str], no_vagrantfile: bool):
    """Start PowerShell inside a Windows container.

    The current directory is mounted at C:/cwd.
    """
    session = BoxSession()
    override = override_from_options(vagrantfile, no_vagrantfile)
    exit_code = run_async(session.powershell(override, keep=keep))
    sys.exit(exit_code)


@cli.command("compose", context_settings=PASSTHROUGH_SETTINGS)
@box_options
@click.argument("compose_args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
def compose_command(
    keep: bool, vagrantfile: Optional[str], no_vagrantfile: bool, compose_args: tuple
):
    """Run docker-compose inside the Windows box.

    docker-compose is installed in the box on first start; the current
    directory is synced to C:/cwd and COMPOSE_ARGS run there.

    Example:

        winboxctl compose up --build
    """
    if not compose_args:
        ctx = click.get_current_context()
        click.echo(ctx.get_help())
        sys.exit(1)

    session = BoxSession()
    override = override_from_options(vagrantfile, no_vagrantfile)
    exit_code = run_async(session.compose(list(compose_args), override, keep=keep))
    sys.exit(exit_code)
