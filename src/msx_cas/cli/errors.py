"""
CLI Error Handling
==================

Provides consistent error messages and exit codes for the mcp tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from msx_cas.errors import CasError, InvalidNameError


class ExitCode(IntEnum):
    """Exit codes for the mcp tool."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Malformed container or packaging error
    INVALID_ARGS = 2     # Invalid arguments, names or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, InvalidNameError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, CasError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        click.echo(f"Error: IO operation failed: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
