"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes across all CLI tools.
Every diagnostic is a single ``ERROR: <message>`` line on stderr, so
stdout carries nothing but machine code or tokens.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from a64asm.errors import A64Error


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Lexing or assembly error
    INVALID_ARGS = 2     # Invalid arguments or unreadable input file
    INTERNAL_ERROR = 3   # Unexpected internal error


def report_error(message: str) -> None:
    """Print one diagnostic line to stderr."""
    click.echo(f"ERROR: {message}", err=True)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, A64Error):
        report_error(str(error))
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, click.BadParameter):
        report_error(str(error))
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        # Missing or unreadable input files
        report_error(str(error))
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        report_error(f"internal error: {error}")
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
