"""Utility modules for rpmsync.

This module exports commonly used utility functions.
"""

from rpmsync.utils.formatting import err_console, print_error
from rpmsync.utils.shell import CommandResult, command_exists, pushd, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "err_console",
    "print_error",
    "pushd",
    "run_command",
]
