"""
Shared CLI Helpers
==================

Input reading and logging setup used by every command-line tool.
"""

import logging
import sys

import click

from a64asm.cli.errors import ExitCode, report_error


# Marker for "read from standard input"
STDIN_MARKER = "-"


def setup_logging(verbose: bool) -> None:
    """Configure logging on stderr; debug output only with -v."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(levelname)s: %(message)s",
    )


def input_name(input_file: str | None) -> str:
    """Name used in error locations for the given input argument."""
    if input_file is None or input_file == STDIN_MARKER:
        return "<stdin>"
    return input_file


def read_input(input_file: str | None) -> str:
    """
    Read the whole input as UTF-8 text.

    An absent argument or ``-`` reads standard input. A file that cannot
    be opened is reported as not found, and input that is not valid UTF-8
    is reported as such; both exit with INVALID_ARGS.
    """
    if input_file is None or input_file == STDIN_MARKER:
        data = click.get_binary_stream("stdin").read()
    else:
        try:
            with open(input_file, "rb") as f:
                data = f.read()
        except OSError:
            report_error(f"file '{input_file}' not found!")
            sys.exit(ExitCode.INVALID_ARGS)

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        report_error(
            f"{input_name(input_file)}: invalid UTF-8 byte 0x{data[e.start]:02x} "
            f"at offset {e.start}"
        )
        sys.exit(ExitCode.INVALID_ARGS)
