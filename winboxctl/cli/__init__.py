# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""winboxctl CLI package."""

import sys

import click

from winboxctl import __version__
from winboxctl.cli.helpers import console
from winboxctl.utils.logging import configure_logging, log_startup_info


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="winboxctl")
@click.option("-v", "--verbose", is_flag=True, help="Run with verbose logging")
def cli(verbose: bool):
    """winboxctl - Run Windows containers in a throwaway Vagrant box."""
    configure_logging(debug=verbose)
    log_startup_info()

    ctx = click.get_current_context()
    if ctx.invoked_subcommand is None:
        click.echo("Usage: winboxctl [OPTIONS] COMMAND [ARGS]...\n")

        def _print_table(title: str, rows: list[tuple[str, str]], width: int) -> None:
            click.echo(f"{title}:")
            for name, desc in rows:
                click.echo(f"  {name.ljust(width)}  {desc}")
            click.echo("")

        groups = [
            (
                "Containers",
                [
                    ("run", "Run a docker image inside the Windows box"),
                    ("powershell", "Start PowerShell inside a Windows container"),
                    ("compose", "Run docker-compose inside the Windows box"),
                ],
            ),
            (
                "Box",
                [
                    ("status", "Show whether the box is running"),
                    ("halt", "Shut down the box"),
                    ("destroy", "Destroy the box and release its disk space"),
                    ("doctor", "Check docker, vagrant and VirtualBox versions"),
                ],
            ),
        ]

        width = max(len(name) for _, rows in groups for name, _ in rows)
        for title, rows in groups:
            _print_table(title, rows, width)
        click.echo("Use --help for full command details.")
        return


def main():
    """Main entry point.

    Malformed invocations exit with 1 instead of click's default 2.
    """
    try:
        rv = cli.main(standalone_mode=False)
    except click.UsageError as exc:
        exc.show()
        sys.exit(1)
    except click.ClickException as exc:
        exc.show()
        sys.exit(exc.exit_code)
    except click.Abort:
        console.print("Aborted!")
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)


from winboxctl.cli.commands import box  # noqa: E402,F401
from winboxctl.cli.commands import machine  # noqa: E402,F401
