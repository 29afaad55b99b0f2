"""Command: wallet balance (Solana by default, EVM with --network)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from wmgr.commands._base import WmgrCommand
from wmgr.commands._options import pop_key_options, solana_key_options, solana_rpc_options

if TYPE_CHECKING:
    from wmgr.commands._context import AppContext


@click.command(
    cls=WmgrCommand,
    examples="""\
  wmgr balance 9xQe...address
  wmgr balance --keyfile id.json --cluster devnet
  wmgr balance 0xAddress --network polygon
  wmgr balance --network mainnet --privkey-file key.hex""",
)
@click.argument("address", required=False)
@solana_key_options
@click.option("--privkey", "private_key", default=None, help="EVM hex private key.")
@click.option(
    "--privkey-file",
    "private_key_file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="EVM private key file.",
)
@solana_rpc_options
@click.option("--network", default=None, help="Query an EVM network instead of Solana.")
@click.pass_obj
def balance(app: AppContext, address: str | None, network: str | None, **kwargs: Any) -> None:
    """Show the balance of ADDRESS, or of the wallet given by key options."""
    from wmgr.services.balance import BalanceService

    options = pop_key_options(kwargs)
    svc = BalanceService(app.settings, **app.service_kwargs())
    if network:
        app.emit(svc.evm_balance(options, address, network=network, rpc=kwargs["rpc"]))
    else:
        app.emit(svc.solana_balance(options, address, **kwargs))
