"""Unified logging and debug infrastructure for winboxctl.

This module provides:
1. Centralized logging configuration
2. Debug mode via WINBOXCTL_DEBUG env var or the --verbose flag
3. Log levels via WINBOXCTL_LOG_LEVEL env var
4. Dual output: Rich console for CLI, file logging for debugging

Usage:
    from winboxctl.utils.logging import get_logger, configure_logging

    # In CLI entry point:
    configure_logging(debug=verbose)

    # In any module:
    logger = get_logger(__name__)
    logger.info("Launching vagrant")
    logger.debug("vagrant status output: ...")
    logger.error("Something failed", exc=exception)

Environment Variables:
    WINBOXCTL_DEBUG=1          Enable debug mode (verbose output)
    WINBOXCTL_LOG_LEVEL=DEBUG  Set log level (DEBUG, INFO, WARNING, ERROR)
    WINBOXCTL_LOG_FILE=/path   Override log file location
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console

from winboxctl.paths import HostPaths

# Global state
_configured = False
_debug_mode = False
_log_file: Optional[Path] = None

# Shared Rich console instances
console = Console()
err_console = Console(stderr=True)

# Custom log level for success messages
SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def _get_log_file() -> Path:
    """Get the log file path."""
    global _log_file
    if _log_file:
        return _log_file

    env_log_file = os.environ.get("WINBOXCTL_LOG_FILE")
    if env_log_file:
        _log_file = Path(env_log_file)
    else:
        _log_file = HostPaths.log_dir() / "winboxctl.log"

    return _log_file


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode or os.environ.get("WINBOXCTL_DEBUG", "").lower() in ("1", "true", "yes")


def configure_logging(
    debug: bool = False,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> None:
    """Configure the logging system.

    Safe to call more than once: a later call with ``debug=True`` still
    switches debug mode on, handlers are only installed the first time.

    Args:
        debug: Enable debug mode (verbose output, debug to console)
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Override log file path
    """
    global _configured, _debug_mode, _log_file

    if debug:
        _debug_mode = True
    if _configured:
        if debug:
            logging.getLogger("winboxctl").setLevel(logging.DEBUG)
        return

    _debug_mode = debug or is_debug_mode()

    if log_file:
        _log_file = log_file

    if log_level:
        level_name = log_level.upper()
    else:
        level_name = os.environ.get(
            "WINBOXCTL_LOG_LEVEL", "DEBUG" if _debug_mode else "INFO"
        ).upper()

    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger("winboxctl")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.propagate = False

    # File handler with rotation (captures all logs)
    try:
        path = _get_log_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
    except OSError:
        # Can't write log file, continue without it
        root_logger.addHandler(logging.NullHandler())

    _configured = True

    root_logger.debug(f"Logging configured: level={level_name}, debug={_debug_mode}")
    if _log_file:
        root_logger.debug(f"Log file: {_log_file}")


class WinboxLogger:
    """Unified logging with Rich console output.

    Provides:
    - Standard log levels (debug, info, warning, error)
    - Success level for green checkmark messages
    - Rich formatting on stdout, errors on stderr
    - File logging for debugging
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.console = console
        self.err_console = err_console

    def debug(self, message: str, console_output: bool = False) -> None:
        """Log debug message.

        By default, debug only goes to the log file. Set console_output=True
        or enable WINBOXCTL_DEBUG to see it in the console.
        """
        self.logger.debug(message)
        if console_output or is_debug_mode():
            self.console.print(f"[dim][DEBUG] {message}[/dim]", highlight=False)

    def info(self, message: str, console_output: bool = True) -> None:
        """Log info message."""
        self.logger.info(message)
        if console_output:
            self.console.print(f"[blue]{message}[/blue]", highlight=False)

    def success(self, message: str, console_output: bool = True) -> None:
        """Log success message (green output)."""
        self.logger.log(SUCCESS_LEVEL, message)
        if console_output:
            self.console.print(f"[green]✓ {message}[/green]", highlight=False)

    def warning(self, message: str, console_output: bool = True) -> None:
        """Log warning message (yellow output, stderr)."""
        self.logger.warning(message)
        if console_output:
            self.err_console.print(f"[yellow]⚠ {message}[/yellow]", highlight=False)

    def error(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        console_output: bool = True,
    ) -> None:
        """Log error message (red output, stderr).

        Args:
            message: Error message
            exc: Optional exception to include in log
            console_output: Output to console
        """
        if exc:
            self.logger.error(f"{message}: {exc}", exc_info=exc)
            error_msg = f"{message}: {exc}"
        else:
            self.logger.error(message)
            error_msg = message

        if console_output:
            self.err_console.print(f"[red]✗ {error_msg}[/red]", highlight=False)

    def exception(self, message: str, console_output: bool = True) -> None:
        """Log exception with full traceback. Call from within an except block."""
        self.logger.exception(message)
        if console_output:
            self.err_console.print(f"[red]✗ {message}[/red]", highlight=False)
            if is_debug_mode():
                self.err_console.print_exception()

    def print(self, message: str, style: Optional[str] = None) -> None:
        """Print to console without logging."""
        if style:
            self.console.print(f"[{style}]{message}[/{style}]", highlight=False)
        else:
            self.console.print(message, highlight=False)


def get_logger(name: str) -> WinboxLogger:
    """Get or create a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        WinboxLogger instance
    """
    if not _configured:
        configure_logging()

    if not name.startswith("winboxctl"):
        name = f"winboxctl.{name}"

    return WinboxLogger(name)


def log_startup_info() -> None:
    """Log startup diagnostic information (call from main entry points)."""
    logger = get_logger("winboxctl.startup")
    logger.debug(f"Python: {sys.version}")
    logger.debug(f"Platform: {sys.platform}")
    logger.debug(f"CWD: {os.getcwd()}")
    logger.debug(f"Debug mode: {is_debug_mode()}")
    logger.debug(f"Log file: {_get_log_file()}")

    for var in ["WINBOXCTL_DEBUG", "WINBOXCTL_LOG_LEVEL", "WINBOXCTL_MACHINE_DIR", "WINBOXCTL_BOX"]:
        value = os.environ.get(var)
        if value:
            logger.debug(f"ENV {var}={value}")
