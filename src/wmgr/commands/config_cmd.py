"""Command group: configuration inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wmgr.commands._base import WmgrGroup

if TYPE_CHECKING:
    from wmgr.commands._context import AppContext


@click.group("config", cls=WmgrGroup)
def config_cmd() -> None:
    """Inspect wmgr configuration."""


@config_cmd.command(
    examples="""\
  wmgr config show
  wmgr --json config show
  WMGR_SOLANA__CLUSTER=devnet wmgr config show""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Print the effective configuration (flags > env > wmgr.toml > defaults)."""
    from wmgr.services.config import ConfigService

    app.emit(ConfigService(app.settings).show())
