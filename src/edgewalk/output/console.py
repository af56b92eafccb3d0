"""Rich Console factory and theme for edgewalk output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

EDGEWALK_THEME = Theme(
    {
        "ew.ok": "bold green",
        "ew.error": "bold red",
        "ew.warning": "bold yellow",
        "ew.op": "bold cyan",
        "ew.key": "dim",
        "ew.id": "bold blue",
        "ew.ref": "dim",
        "ew.cursor": "magenta",
        "ew.collection.users": "green",
        "ew.collection.groups": "yellow",
        "ew.collection.edges": "cyan",
    }
)

_COLLECTION_STYLES: dict[str, str] = {
    "users": "ew.collection.users",
    "groups": "ew.collection.groups",
    "edges": "ew.collection.edges",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=EDGEWALK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_collection(collection: str) -> str:
    """Return the Rich style name for a collection."""
    return _COLLECTION_STYLES.get(collection, "")
