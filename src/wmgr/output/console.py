"""Rich theme and off-screen console for wmgr output.

Renderers draw on a Console backed by a StringIO buffer and the CLI
echoes the captured text, so the ``format_result() -> str`` contract
holds for every output mode.  Rich drops colour codes when stdout is not
a terminal (pipes, CliRunner).
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

WMGR_THEME = Theme(
    {
        "wmgr.ok": "bold green",
        "wmgr.error": "bold red",
        "wmgr.warning": "bold yellow",
        "wmgr.op": "bold cyan",
        "wmgr.key": "dim",
        "wmgr.address": "bold blue",
        "wmgr.tx": "magenta",
        "wmgr.amount": "bold",
    }
)

_FIELD_STYLES: dict[str, str] = {
    **dict.fromkeys(("address", "from", "to", "token", "mint"), "wmgr.address"),
    **dict.fromkeys(("signature", "tx_hash"), "wmgr.tx"),
    **dict.fromkeys(("amount", "sol", "usdc", "balance"), "wmgr.amount"),
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Console writing into a fresh StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=WMGR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def render_text(draw: Callable[[Console], None], *, width: int | None = None) -> str:
    """Run *draw* against an off-screen console and return what it printed."""
    console = create_console(width=width)
    draw(console)
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue().rstrip("\n")


def style_for_field(key: str) -> str:
    """Theme style for a data field (addresses, hashes, amounts), or ``""``."""
    return _FIELD_STYLES.get(key, "")
