"""Rich Console factory and theme for writenex output.

Consoles render to a StringIO buffer so renderers return plain strings.
In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WRITENEX_THEME = Theme(
    {
        "wnx.ok": "bold green",
        "wnx.error": "bold red",
        "wnx.warning": "bold yellow",
        "wnx.op": "bold cyan",
        "wnx.key": "dim",
        "wnx.id": "bold blue",
        "wnx.path": "dim",
        "wnx.title": "bold",
        "wnx.pattern": "magenta",
        "wnx.draft": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=WRITENEX_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
