"""Reusable option stacks for wallet commands.

Names of the key options match the :class:`KeyOptions` fields, so a
command can hand its keyword arguments straight to :func:`pop_key_options`.
Choices (cluster, network, profile) are validated by the domain layer so
that unknown names list the valid ones.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from wmgr.domain.credentials import KeyOptions

F = TypeVar("F", bound=Callable[..., Any])

KEY_OPTION_NAMES: tuple[str, ...] = tuple(KeyOptions.model_fields)


def _stack(*decorators: Callable[[F], F]) -> Callable[[F], F]:
    """Apply *decorators* so they appear in ``--help`` in the given order."""

    def wrapper(func: F) -> F:
        for decorator in reversed(decorators):
            func = decorator(func)
        return func

    return wrapper


_seed_options = (
    click.option("--seed", default=None, help="BIP-39 mnemonic phrase (quote it)."),
    click.option("--path", default=None, help="Explicit HD derivation path."),
    click.option(
        "--seed-passphrase", default=None, help="Optional BIP-39 passphrase (25th word)."
    ),
)

_svpi_options = (
    click.option("--svpi", is_flag=True, default=False, help="Fetch the mnemonic from svpi."),
    click.option("--svpi-name", default=None, help="svpi entry name (prompted if omitted)."),
    click.option(
        "--svpi-file",
        default=None,
        type=click.Path(dir_okay=False, path_type=Path),
        help="svpi storage file.",
    ),
    click.option("--svpi-cmd", "svpi_command", default=None, help="svpi executable."),
    click.option(
        "--svpi-pass", "svpi_password", default=None, help="svpi password (prompted if omitted)."
    ),
    click.option(
        "--svpi-protocol", default=None, help="svpi output protocol: json (default) or log."
    ),
)


def solana_key_options(func: F) -> F:
    """--keyfile, mnemonic and svpi sources plus ``--mnemo`` profile."""
    return _stack(
        click.option(
            "--keyfile",
            default=None,
            type=click.Path(dir_okay=False, path_type=Path),
            help="Solana CLI keypair JSON file.",
        ),
        *_seed_options,
        click.option(
            "--mnemo",
            "mnemonic_profile",
            default=None,
            help="Derivation profile for --seed/--svpi: trustwallet, phantom, "
            "solflare, solana_cli.",
        ),
        *_svpi_options,
    )(func)


def solana_rpc_options(func: F) -> F:
    return _stack(
        click.option("--cluster", default=None, help="mainnet-beta, devnet, testnet, localnet."),
        click.option("--rpc", default=None, help="Override the cluster RPC URL."),
        click.option(
            "--commitment", default=None, help="processed, confirmed (default) or finalized."
        ),
    )(func)


def evm_key_options(func: F) -> F:
    """--privkey / --privkey-file, mnemonic and svpi sources."""
    return _stack(
        click.option("--privkey", "private_key", default=None, help="Hex private key."),
        click.option(
            "--privkey-file",
            "private_key_file",
            default=None,
            type=click.Path(dir_okay=False, path_type=Path),
            help="File holding a hex private key.",
        ),
        *_seed_options,
        *_svpi_options,
    )(func)


def evm_tx_options(func: F) -> F:
    return _stack(
        click.option("--network", default=None, help="EVM network name (default: mainnet)."),
        click.option("--rpc", default=None, help="Override the network RPC URL."),
        click.option("--gas-price", default=None, help="Gas price in gwei."),
        click.option("--gas-limit", default=None, type=int, help="Gas limit."),
    )(func)


def pop_key_options(kwargs: dict[str, Any]) -> KeyOptions:
    """Move the key-related entries of *kwargs* into a :class:`KeyOptions`."""
    values = {name: kwargs.pop(name) for name in KEY_OPTION_NAMES if name in kwargs}
    values["svpi"] = bool(values.get("svpi"))
    return KeyOptions(**values)
