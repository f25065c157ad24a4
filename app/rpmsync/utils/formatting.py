"""Rich console formatting utilities.

Scriptlet output goes to stderr so it never mixes with what RPM itself
prints on stdout.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

THEME = Theme(
    {
        "error": "#f53263",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for stderr.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stderr.isatty():
        return "truecolor"
    return None


# Shared console for errors and log records
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")
