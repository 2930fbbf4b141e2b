# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Utility functions for CLI helpers."""

import asyncio
import functools
import sys
from typing import Any, Awaitable, Callable, Optional, TypeVar

from rich.panel import Panel

from winboxctl.errors import WinboxError
from winboxctl.utils.logging import err_console, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def show_error_panel(title: str, message: str, hint: Optional[str] = None) -> None:
    """Display a formatted error panel on stderr.

    Args:
        title: Panel title (shown in red)
        message: Main error message
        hint: Optional hint text (shown with blue "Hint:" prefix)
    """
    content = message
    if hint:
        content += f"\n\n[blue]Hint:[/blue] {hint}"
    err_console.print(Panel(content, title=f"[red]{title}[/red]", border_style="red"))


def run_async(coro: Awaitable[T]) -> T:
    """Run a coroutine to completion from a synchronous click command."""
    return asyncio.run(coro)


def handle_errors(func: Callable) -> Callable:
    """Decorator that wraps CLI commands with standard error handling.

    Catches exceptions, prints error with nice formatting, and exits with code 1.
    Special handling for:
    - WinboxError: Panel titled after the error type, with its hint
    - ClickException: Left to click
    - Other exceptions: Generic error panel

    Usage:
        @cli.command()
        @handle_errors
        def my_command():
            ...
    """
    import click

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise  # Let sys.exit() pass through
        except WinboxError as exc:
            logger.error(f"{exc.title}: {exc}", console_output=False)
            show_error_panel(exc.title, str(exc), exc.hint)
            sys.exit(1)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            err_console.print("[yellow]Interrupted[/yellow]")
            sys.exit(130)
        except Exception as exc:
            logger.exception("Unexpected error", console_output=False)
            show_error_panel("Error", str(exc) or exc.__class__.__name__)
            sys.exit(1)

    return wrapper
