"""Root CLI group for wmgr with global flags and command registration."""

from __future__ import annotations

import click

from wmgr import __version__
from wmgr.commands import register_commands
from wmgr.commands._base import WmgrGroup
from wmgr.commands._context import AppContext
from wmgr.config.settings import WmgrSettings


@click.group(cls=WmgrGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wmgr")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (signature / tx hash).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Never prompt; missing input is an error.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
) -> None:
    """wmgr: Solana and EVM wallet transfers from the command line."""
    flags = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
        "no_interact": no_interact,
    }
    # Unset flags must not mask WMGR_* env vars or wmgr.toml.
    settings = WmgrSettings.from_cli(
        config_path=config_path, **{name: True for name, on in flags.items() if on}
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
