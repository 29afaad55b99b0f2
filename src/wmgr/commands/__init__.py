"""Subcommand modules for wmgr.

Provides register_commands() which uses deferred imports to keep
``wmgr --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``send`` and ``config`` groups and the ``balance`` command."""
    from wmgr.commands.balance import balance
    from wmgr.commands.config_cmd import config_cmd
    from wmgr.commands.send import send

    cli.add_command(send)
    cli.add_command(balance)
    cli.add_command(config_cmd)
