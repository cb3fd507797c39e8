"""Console output for the spatialbench CLI.

All commands print through one Rich console: status lines (a colored mark
and a message) and right-aligned count tables. Colors are disabled by
``--no-color`` or the NO_COLOR environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.table import Table

# Status kind -> (mark, Rich style)
_MARKS: dict[str, tuple[str, str]] = {
    "success": ("✓", "green"),
    "error": ("✗", "red"),
}


def create_console(no_color: bool = False) -> Console:
    """Return a console writing to the current stdout.

    Args:
        no_color: Disable colors and terminal control codes.
    """
    plain = no_color or "NO_COLOR" in os.environ
    return Console(force_terminal=False if plain else None, no_color=plain)


console = create_console()


def set_no_color(no_color: bool) -> None:
    """Replace the shared console (``--no-color`` callback)."""
    global console
    console = create_console(no_color=no_color)


def _status(kind: str, message: str, **kwargs: Any) -> None:
    mark, style = _MARKS[kind]
    console.print(f"[{style}]{mark}[/{style}] {message}", **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print ``✓ message``, e.g. after files were generated."""
    _status("success", message, **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print ``✗ message`` for a failed command."""
    _status("error", message, **kwargs)


def info(message: str, **kwargs: Any) -> None:
    console.print(message, **kwargs)


def print_table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    **kwargs: Any,
) -> None:
    """Print rows under ``title``.

    The first column holds names (table, file or preset) and is
    left-aligned; the remaining columns hold counts and are right-aligned.
    """
    table = Table(title=title, title_justify="left")
    table.add_column(columns[0], no_wrap=True)
    for column in columns[1:]:
        table.add_column(column, justify="right")
    for row in rows:
        table.add_row(*map(str, row))
    console.print(table, **kwargs)
