"""Operation-specific Rich renderers for ServiceResult.

Each renderer draws on the off-screen Console supplied by
:func:`wmgr.output.console.render_text`.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from wmgr.output.console import render_text, style_for_field

if TYPE_CHECKING:
    from rich.console import Console

    from wmgr.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """

    def draw(console: Console) -> None:
        if not result.ok:
            _render_error(result, console, verbose=verbose)
            return
        _OP_RENDERERS.get(result.op, _render_generic)(result, console)
        if verbose:
            _render_meta(console, result)

    return render_text(draw)


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Transfers print only the signature or transaction hash, so the
    output can be piped into other tools.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.reference:
        return result.reference
    d = result.data
    if "sol" in d:
        return f"{d['sol']} SOL {d['usdc']} USDC"
    if "balance" in d:
        return str(d["balance"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="wmgr.ok")
    op = Text(f"  {result.op}", style="wmgr.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any, *, indent: int = 2) -> None:
    """Print a single indented key-value field."""
    k = Text(f"{' ' * indent}{key}: ", style="wmgr.key")
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    v = Text(str(value), style=style_for_field(key))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        _field(console, k, v, indent=4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="wmgr.error")
    op = Text(f"  {result.op}", style="wmgr.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(": "), Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            _field(console, k, v, indent=4)
    if verbose:
        _render_meta(console, result)


# ── Transfer renderers ────────────────────────────────────────────────


def _render_transfer(result: ServiceResult, console: Console) -> None:
    """Render send_sol / send_usdc / send_eth / send_erc20 results."""
    _status_line(console, result)
    d = result.data
    symbol = d.get("symbol")
    for key in ("from", "to", "token"):
        if key in d:
            _field(console, key, d[key])
    amount = f"{d['amount']} {symbol}" if symbol else d.get("amount")
    _field(console, "amount", amount)
    _field(console, "base_units", d.get("base_units"))
    for key in ("signature", "tx_hash", "block", "status"):
        if key in d:
            _field(console, key, d[key])


# ── Balance renderer ──────────────────────────────────────────────────


def _render_balance(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "address", d["address"])
    if "sol" in d:
        _field(console, "sol", d["sol"])
        _field(console, "usdc", d["usdc"])
    else:
        _field(console, "balance", d["balance"])


# ── Config renderer ───────────────────────────────────────────────────


def _render_config(result: ServiceResult, console: Console) -> None:
    """Render ``config show`` as one table per section."""
    _status_line(console, result)
    d = result.data
    _field(console, "config_path", d.get("config_path") or "(none)")
    for section, values in d.items():
        if not isinstance(values, dict):
            continue
        title = Text(f"[{section}]", style="bold")
        table = Table(title=title, title_justify="left", show_header=False, box=None)
        table.add_column("key", style="wmgr.key")
        table.add_column("value")
        for key, value in values.items():
            table.add_row(key, Text("" if value is None else str(value)))
        console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "send_sol": _render_transfer,
    "send_usdc": _render_transfer,
    "send_eth": _render_transfer,
    "send_erc20": _render_transfer,
    "balance": _render_balance,
    "config_show": _render_config,
}
