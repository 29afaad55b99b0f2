"""Command group: transfers (sol, usdc, eth, erc20)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from wmgr.commands._base import WmgrGroup
from wmgr.commands._options import (
    evm_key_options,
    evm_tx_options,
    pop_key_options,
    solana_key_options,
    solana_rpc_options,
)

if TYPE_CHECKING:
    from wmgr.commands._context import AppContext
    from wmgr.services.transfer import TransferService

_SEND_EXAMPLES = """\
  wmgr send sol <TO> 0.5 --keyfile ~/.config/solana/id.json
  wmgr send usdc <TO> 12.5 --svpi --svpi-name main --cluster devnet
  wmgr send eth 0xRecipient 0.01 --privkey-file key.hex --network sepolia
  wmgr send erc20 0xToken 0xRecipient 100 --seed "..." --decimals 6"""


def _service(app: AppContext) -> TransferService:
    from wmgr.services.transfer import TransferService

    return TransferService(app.settings, **app.service_kwargs())


@click.group(cls=WmgrGroup, examples=_SEND_EXAMPLES)
def send() -> None:
    """Send SOL, USDC, ETH or ERC-20 tokens."""


@send.command(
    examples="""\
  wmgr send sol 9xQe...recipient 0.25 --keyfile id.json
  wmgr send sol 9xQe...recipient 1 --seed "word1 ... word12" --mnemo phantom
  wmgr -q send sol 9xQe...recipient 0.1 --svpi --svpi-name hot --cluster devnet""",
)
@click.argument("to")
@click.argument("amount")
@solana_key_options
@solana_rpc_options
@click.pass_obj
def sol(app: AppContext, to: str, amount: str, **kwargs: Any) -> None:
    """Send native SOL to TO."""
    options = pop_key_options(kwargs)
    app.emit(_service(app).send_sol(options, to, amount, **kwargs))


@send.command(
    examples="""\
  wmgr send usdc 9xQe...recipient 10 --keyfile id.json
  wmgr send usdc 9xQe...recipient 2.5 --cluster devnet --svpi""",
)
@click.argument("to")
@click.argument("amount")
@solana_key_options
@solana_rpc_options
@click.pass_obj
def usdc(app: AppContext, to: str, amount: str, **kwargs: Any) -> None:
    """Send USDC (SPL token) to TO, creating token accounts as needed."""
    options = pop_key_options(kwargs)
    app.emit(_service(app).send_usdc(options, to, amount, **kwargs))


@send.command(
    examples="""\
  wmgr send eth 0xRecipient 0.05 --privkey 0x...
  wmgr send eth 0xRecipient 1 --network polygon --gas-price 30 --seed "..."
  wmgr --json send eth 0xRecipient 0.01 --svpi --svpi-name evm""",
)
@click.argument("to")
@click.argument("amount")
@evm_key_options
@evm_tx_options
@click.pass_obj
def eth(app: AppContext, to: str, amount: str, **kwargs: Any) -> None:
    """Send the network's native coin to TO."""
    options = pop_key_options(kwargs)
    app.emit(_service(app).send_eth(options, to, amount, **kwargs))


@send.command(
    examples="""\
  wmgr send erc20 0xToken 0xRecipient 25 --privkey-file key.hex
  wmgr send erc20 0xToken 0xRecipient 1.5 --decimals 6 --network polygon""",
)
@click.argument("token")
@click.argument("to")
@click.argument("amount")
@click.option("--decimals", default=None, type=int, help="Token decimals (default: on-chain).")
@evm_key_options
@evm_tx_options
@click.pass_obj
def erc20(app: AppContext, token: str, to: str, amount: str, **kwargs: Any) -> None:
    """Send AMOUNT of the ERC-20 TOKEN to TO."""
    options = pop_key_options(kwargs)
    app.emit(_service(app).send_erc20(options, token, to, amount, **kwargs))
