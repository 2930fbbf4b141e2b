# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Commands that manage the box itself."""

import sys

import click

from winboxctl.cli import cli
from winboxctl.cli.helpers import console, handle_errors, run_async
from winboxctl.session import BoxSession
from winboxctl.vagrant import BoxState

STATE_STYLES = {
    BoxState.RUNNING: "green",
    BoxState.STOPPED: "yellow",
    BoxState.UNKNOWN: "red",
}


@cli.command("halt")
@handle_errors
def halt_command():
    """Shut down the vagrant box."""
    session = BoxSession()
    sys.exit(run_async(session.vagrant_command(["halt"])))


@cli.command("destroy")
@click.option("-f", "--force", is_flag=True, help="Destroy without confirmation")
@handle_errors
def destroy_command(force: bool):
    """Destroy the vagrant box and release the disk space."""
    session = BoxSession()
    args = ["destroy", "-f"] if force else ["destroy"]
    sys.exit(run_async(session.vagrant_command(args)))


@cli.command("status")
@handle_errors
def status_command():
    """Show whether the box is running."""
    session = BoxSession()
    state = run_async(session.status())
    style = STATE_STYLES[state]
    console.print(f"{session.vagrant.box}: [{style}]{state.value}[/{style}]")
    console.print(f"[dim]machine dir: {session.config.machine_dir}[/dim]")
    if session.overlay.exists():
        console.print(f"[dim]overlay: {session.overlay.path}[/dim]")


@cli.command("doctor")
@handle_errors
def doctor_command():
    """Check that docker, vagrant and VirtualBox are installed."""
    session = BoxSession()
    run_async(session.gate.assert_prerequisites())
    session.ensure_machine_dir()
    console.print(f"[green]✓ machine dir: {session.config.machine_dir}[/green]")
